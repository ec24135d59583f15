"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile and deployed to
the corresponding environment.

The configuration document follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "service": {
            "base_url": "https://sho.rt",
            "code_length": 7,
            "default_expiry_days": null,
            ...
        },
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) plus the shared
`"service"` section.

When running locally (SAM CLI or `APP_ENV=local`), the same document may be
provided as a YAML file instead:

    config/
    ├── local.yml
    └── dev.yml

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    load_config(function_name: str) -> dict
        Load the configuration of a given Lambda from AWS AppConfig (or a local
        YAML file when running locally).

Classes:
    ServiceSettings
        Typed view over the `service` section.

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlinks.utils.config import load_config, ServiceSettings
        >>> app_config = load_config('redirect_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
        >>> ServiceSettings.from_config(app_config['service']).code_length
        7
"""

import os
import json
import logging
import functools
from dataclasses import dataclass, fields
from pathlib import Path
from collections.abc import Callable
from typing import Any, Optional

import boto3
import yaml

from shortlinks.constants import ENV, Defaults
from shortlinks.exceptions import ConfigurationError
from shortlinks.types import AppConfig
from shortlinks.utils.helpers import require_environment, running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Example:
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> app_name()
        'shortlinks'
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Finds the project root via the environment variable PROJECT_ROOT.
    Falls back to the current working directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlinks:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _select_sections(document: dict, function_name: str) -> AppConfig:
    """Extract the active backend section of a lambda and the shared service section."""
    try:
        backend = document['active_backend']
        data = {backend: document['configs'][function_name][backend]}
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Configuration document has no '{function_name}' section for its active backend.") from e
    data['service'] = document.get('service') or {}
    return data


def _load_local_config(func: Callable[[str], AppConfig]) -> Callable[[str], AppConfig]:
    """Decorator: load configuration from `config/<APP_ENV>.yml` when running locally

    Behavior:
        - If the application is running locally and the YAML file exists under
          the project root, parse it and extract the lambda's sections.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> AppConfig:
        path = project_root() / 'config' / f'{app_env()}.yml'
        if not running_locally() or not path.is_file():
            return func(function_name, *args, **kwargs)

        logger.debug('Loading configuration from local file.', extra={'path': str(path), 'functionName': function_name})
        with path.open(encoding='utf-8') as f:
            document = yaml.safe_load(f) or {}
        return _select_sections(document, function_name)

    return wrapper


@_load_local_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(function_name: str) -> AppConfig:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant to the
    requested Lambda function (e.g. 'shorten_url', 'redirect_url') along with
    the shared 'service' section.

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        function_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: {<active backend>: {...}, 'service': {...}}

    Raises:
        ConfigurationError:
            If an APPCONFIG_* variable is missing or the document lacks the lambda's section.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'functionName': function_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = _select_sections(document, function_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'functionName': function_name, 'build': document.get('build')})
    return data


@dataclass(frozen=True)
class ServiceSettings:
    """Typed view over the `service` configuration section.

    Attributes:
        base_url (Optional[str]):
            Public base of short URLs. None derives it from the request.
        code_length (int):
            Characters per generated shortcode.
        max_create_attempts (int):
            Shortcode generation attempts before giving up.
        default_expiry_days (Optional[int]):
            Lifetime applied when a request doesn't ask for one. None means never expire.
        max_expiry_days (int):
            Upper bound for requested lifetimes.
        timeline_window_days (int):
            Default analytics timeline window.
        geo_fallback_country (str):
            Country recorded when the visitor's IP can't be geolocated.
        geo_lookup_enabled (bool):
            If False, every visit records `geo_fallback_country`.
        recording_attempts (int):
            Visit recording attempts before the visit is dropped.
    """

    base_url: Optional[str] = None
    code_length: int = Defaults.SHORTCODE_LENGTH
    max_create_attempts: int = Defaults.MAX_CREATE_ATTEMPTS
    default_expiry_days: Optional[int] = None
    max_expiry_days: int = Defaults.MAX_EXPIRY_DAYS
    timeline_window_days: int = Defaults.TIMELINE_WINDOW_DAYS
    geo_fallback_country: str = Defaults.GEO_FALLBACK_COUNTRY
    geo_lookup_enabled: bool = True
    recording_attempts: int = Defaults.RECORDING_ATTEMPTS

    def __post_init__(self):
        if self.code_length < 1:
            raise ConfigurationError(f'code_length must be positive (given value: {self.code_length}).')
        if self.max_create_attempts < 1:
            raise ConfigurationError(f'max_create_attempts must be positive (given value: {self.max_create_attempts}).')
        if self.recording_attempts < 1:
            raise ConfigurationError(f'recording_attempts must be positive (given value: {self.recording_attempts}).')
        if self.timeline_window_days < 1:
            raise ConfigurationError(f'timeline_window_days must be positive (given value: {self.timeline_window_days}).')

    @classmethod
    def from_config(cls, section: Optional[dict[str, Any]], fallback_base_url: Optional[str] = None) -> 'ServiceSettings':
        """Build settings from a `service` section, ignoring unknown keys

        Args:
            section (Optional[dict]):
                The `service` section of the configuration document.
            fallback_base_url (Optional[str]):
                Used when the section doesn't configure `base_url`
                (typically derived from the API Gateway event).
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in (section or {}).items() if key in known and value is not None}
        values.setdefault('base_url', fallback_base_url)
        return cls(**values)
