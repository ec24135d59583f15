"""Helper utilities for AWS lambda functions.

Functions:
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(identifier, base) -> str
        Get string representation of short URL for a given identifier
    owner_id(event) -> str | None
        Extract the Amazon Cognito user id from API Gateway event
    client_ip(event) -> str | None
        Extract the visitor's IP address from API Gateway event
    user_agent(event) -> str | None
        Extract the raw User-Agent header from API Gateway event
    running_locally() -> bool
        True under `sam local` or with APP_ENV=local
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unhandled exceptions into generic HTTP 500 responses

Example:
    >>> from shortlinks.utils.helpers import owner_id, client_ip
    >>> event = {
    ...     'headers': {'X-Forwarded-For': '93.123.23.1, 10.0.0.1'},
    ...     'requestContext': {'authorizer': {'claims': {'sub': 'user123'}}},
    ... }
    >>> owner_id(event), client_ip(event)
    ('user123', '93.123.23.1')
"""

import os
import json
import logging
import functools
from typing import Any
from collections.abc import Callable

from shortlinks.constants import ENV, Defaults, UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Public base URL that short URLs are built on, derived from the request

    A custom domain maps the API at its root. The default execute-api domain
    serves it under the stage name. Without a domain (SAM CLI, tests) the local
    development URL is used.

    Example:
        >>> base_url({'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}})
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
        >>> base_url({'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
        'https://sho.rt'
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName')
    if not domain:
        return Defaults.LOCAL_BASE_URL

    stage = request_context.get('stage')
    if '.execute-api.' in domain and stage:
        return f'https://{domain}/{stage}'
    return f'https://{domain}'


def get_short_url(identifier: str, base: str) -> str:
    """Get string representation of shortened URL

    Args:
        identifier (str): short code or custom alias
        base (str): public base URL

    Returns:
        str: short url string representation
    """
    return f'{base.rstrip("/")}/{identifier}'


def owner_id(event: dict[str, Any]) -> str | None:
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub')


def _header(event: dict[str, Any], name: str) -> str | None:
    # API Gateway keeps the client's header casing
    for key, value in (event.get('headers') or {}).items():
        if key.lower() == name.lower():
            return value
    return None


def client_ip(event: dict[str, Any]) -> str | None:
    """Extract the visitor's IP address

    The first hop of X-Forwarded-For wins over API Gateway's source IP.
    """
    forwarded = _header(event, 'X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    identity = (event.get('requestContext') or {}).get('identity') or {}
    return identity.get('sourceIp')


def user_agent(event: dict[str, Any]) -> str | None:
    return _header(event, 'User-Agent')


def running_locally() -> bool:
    """Check if the lambda runs locally (`sam local invoke` or APP_ENV=local)"""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def require_environment(*names: str) -> Callable:
    """Decorator: refuse to run unless every named environment variable is set

    Raises:
        ConfigurationError:
            Listing every missing or empty variable.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def fetch():
        ...     pass
        >>> fetch()
        ConfigurationError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = ', '.join(f"'{name}'" for name in names if not os.environ.get(name))
            if missing:
                raise ConfigurationError(f'Missing required environment variables: {missing}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a generic HTTP 500 when a lambda handler raises

    The response carries no internal detail. When running locally the original
    exception is re-raised to ease debugging.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
