"""API Gateway (Lambda proxy format) responses shared by the HTTP handlers."""

import json
from typing import Any

from linkshortener.exceptions import (
    AlreadyExpiredError,
    LinkNotFoundError,
    LinkNotOwnedError,
    ServiceError,
    TokenGenerationError,
)
from linkshortener.models import LinkModel
from linkshortener.types import LambdaEvent, LambdaResponse


JSON_HEADERS = {'Content-Type': 'application/json'}

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,X-User-Name',
    'Access-Control-Allow-Methods': 'OPTIONS,GET,POST,PATCH,DELETE',
}

# HTTP status of rejected service operations (every other ServiceError is a 400)
SERVICE_ERROR_STATUS = {
    LinkNotFoundError: 404,
    LinkNotOwnedError: 403,
    AlreadyExpiredError: 409,
    TokenGenerationError: 503,
}

REASONS = {
    400: 'Bad Request',
    401: 'Unauthorized',
    403: 'Forbidden',
    404: 'Not Found',
    405: 'Method Not Allowed',
    409: 'Conflict',
    500: 'Internal Server Error',
    503: 'Service Unavailable',
}


def _response(status_code: int, body: dict, headers: dict | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_200(body: dict) -> LambdaResponse:
    return _response(200, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_error(
    status_code: int,
    message: str | None = None,
    error_code: str | None = None,
    field: str | None = None,
    headers: dict | None = None,
) -> LambdaResponse:
    """Error response with message `<reason> (<message>)` and optional `errorCode`/`field`."""
    base = REASONS.get(status_code, 'Error')
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    if field:
        body['field'] = field
    return _response(status_code, body, headers)


def response_400(message: str | None = None, error_code: str | None = None, field: str | None = None) -> LambdaResponse:
    return response_error(400, message, error_code, field)


def response_401(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(401, message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(404, message, error_code)


def response_405(*, allowed: list[str]) -> LambdaResponse:
    return response_error(405, f"allowed methods: {', '.join(allowed)}", headers={'Allow': ', '.join(allowed)})


def response_service_error(error: ServiceError) -> LambdaResponse:
    status_code = SERVICE_ERROR_STATUS.get(type(error), 400)
    return response_error(status_code, str(error) or None, error.error_code, error.field)


def serialize_link(link: LinkModel, short_url: str) -> dict[str, Any]:
    return {
        'token': link.token,
        'short_url': short_url,
        'target_url': link.target,
        'expires_at': link.expires_at.isoformat() if link.expires_at is not None else None,
        'visits_left': link.visits_left,
    }


def parse_json_body(event: LambdaEvent) -> dict | None:
    """Return the JSON object in the request body ({} if empty), or None if it isn't one."""
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        return None
    return body if isinstance(body, dict) else None
