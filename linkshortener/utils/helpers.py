"""Helper utilities shared across the service and lambda handlers.

Functions:
    utcnow() -> datetime
        Current time as a timezone-aware UTC datetime (default service clock)
    get_short_url(token, base_url) -> str
        Get string representation of short URL for a given token
    token_from_short_url(value, base_url) -> str
        Extract a token from either a bare token or a full short URL
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn unexpected handler errors into a 500 response

Example:
    >>> get_short_url('aB3xY9', 'https://sho.rt/')
    'https://sho.rt/aB3xY9'
    >>> token_from_short_url('https://sho.rt/aB3xY9', 'https://sho.rt/')
    'aB3xY9'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from linkshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from linkshortener.exceptions import MissingEnvironmentVariableError
from linkshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def get_short_url(token: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        token (str): short link token
        base_url (str): public prefix of short links

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{token}'


def token_from_short_url(value: str, base_url: str) -> str:
    """Return the token of a short link given either the token or the full short URL

    Both the configured base URL and a scheme-less variant of it are stripped
    ("https://sho.rt/abc123" and "sho.rt/abc123" both yield "abc123").

    Args:
        value (str): bare token or short URL
        base_url (str): public prefix of short links

    Returns:
        str: the token, or an empty string if nothing is left after stripping
    """
    value = value.strip()
    prefix = base_url.rstrip('/') + '/'
    bare_prefix = prefix.split('://', 1)[-1]

    for candidate in (prefix, bare_prefix):
        if value.startswith(candidate):
            return value[len(candidate) :].strip('/')
    return value.strip('/')


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable) -> Callable:
    """Decorator: respond with 500 if a lambda handler raises unexpectedly

    When running locally the original exception is re-raised instead, so the
    stack trace shows up in the SAM console.
    """

    @functools.wraps(func)
    def wrapper(event, context):
        try:
            return func(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps({'message': 'Internal Server Error', 'error_code': UNKNOWN_INTERNAL_SERVER_ERROR}),
            }

    return wrapper
