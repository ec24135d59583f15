from collections.abc import Callable
from typing import Any


# API Gateway (Lambda proxy) payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]

# Sections of the configuration document a lambda receives from load_config()
type AppConfig = dict[str, Any]

# Produces a candidate shortcode of the requested length
type ShortcodeFactory = Callable[[int], str]
