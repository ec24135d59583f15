from enum import StrEnum


class Defaults:
    """Default service parameters (overridable via AppConfig `service` section)."""

    SHORTCODE_LENGTH = 7  # 62^7 ~ 3.5e12 codes
    MAX_CREATE_ATTEMPTS = 5  # Bounded retry on generated shortcode collisions
    MAX_EXPIRY_DAYS = 3650  # Upper bound for `expires_in_days`
    TIMELINE_WINDOW_DAYS = 7  # Analytics timeline window
    RECORDING_ATTEMPTS = 2  # Visit recording attempts before the visit is dropped
    GEO_FALLBACK_COUNTRY = 'Unknown'
    LOCAL_BASE_URL = 'http://localhost:3000'


class AliasRules:
    """Syntactic rules for user supplied custom aliases."""

    MIN_LENGTH = 3
    MAX_LENGTH = 50
    PATTERN = r'[A-Za-z0-9_-]+'


# Maximum accepted length of a destination URL
MAX_URL_LENGTH = 2048


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
