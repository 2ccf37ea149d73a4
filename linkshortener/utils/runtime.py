"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if running in local SAM (or APP_ENV=local), False otherwise.
    get_user_name(event) -> str | None:
        Extract the trusted user name of an API Gateway request.

Example:
    >>> from linkshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os

from linkshortener.constants import ENV
from linkshortener.types import LambdaEvent


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_user_name(event: LambdaEvent) -> str | None:
    """Return the user name of the caller, or None if the request is anonymous.

    The authorizer's `username` claim is trusted in AWS. When running locally the
    `X-User-Name` header stands in for it, because `sam local start-api` can't
    inject authorizer claims into the event.
    """
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    user_name = claims.get('username')

    if user_name is None and running_locally():
        headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
        return headers.get('x-user-name')
    return user_name
