"""Unit tests for helper utilities in helpers.py.

Test coverage includes:

1. Short URL formatting
   - Ensures get_short_url() joins base URL and token with exactly one slash.

2. Token extraction
   - Ensures token_from_short_url() accepts bare tokens and full short URLs.

3. utcnow()
   - Ensures the default clock is timezone-aware UTC.

4. require_environment() decorator
   - Happy path and missing/empty environment variables.

5. guarantee_500_response() behavior
"""

import json
from datetime import datetime, UTC

import pytest
from freezegun import freeze_time

from linkshortener.exceptions import MissingEnvironmentVariableError
from linkshortener.utils.helpers import (
    utcnow,
    get_short_url,
    token_from_short_url,
    require_environment,
    guarantee_500_response,
)


# -------------------------------
# 1. Short URL formatting
# -------------------------------


@pytest.mark.parametrize(
    'token, base_url, expected',
    [
        ('aB3xY9', 'https://sho.rt/', 'https://sho.rt/aB3xY9'),
        ('aB3xY9', 'https://sho.rt', 'https://sho.rt/aB3xY9'),
        ('xyz789', 'http://localhost:3000/', 'http://localhost:3000/xyz789'),
        ('xyz789', 'https://api.example.com/Prod/', 'https://api.example.com/Prod/xyz789'),
    ],
)
def test_get_short_url(token, base_url, expected):
    """1.1. get_short_url() returns the correct short URL string."""
    assert get_short_url(token, base_url) == expected


# -------------------------------
# 2. Token extraction
# -------------------------------


@pytest.mark.parametrize(
    'value, expected',
    [
        ('aB3xY9', 'aB3xY9'),
        (' aB3xY9 ', 'aB3xY9'),
        ('https://sho.rt/aB3xY9', 'aB3xY9'),
        ('sho.rt/aB3xY9', 'aB3xY9'),
        ('https://sho.rt/aB3xY9/', 'aB3xY9'),
        ('https://sho.rt/', ''),
    ],
)
def test_token_from_short_url(value, expected):
    """2.1. Both bare tokens and short URLs yield the token."""
    assert token_from_short_url(value, 'https://sho.rt/') == expected


# -------------------------------
# 3. utcnow()
# -------------------------------


@freeze_time('2026-10-19 12:00:00')
def test_utcnow():
    """3.1. utcnow() is timezone-aware UTC."""
    now = utcnow()

    assert now == datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    assert now.tzinfo is not None


# -------------------------------
# 4.1. require_environment() happy path
# -------------------------------


def test_require_environment_happy_path(monkeypatch):
    """4.1. Decorated function executes when all env vars are present."""
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def sample_function(x: int) -> int:
        return x + 1

    assert sample_function(1) == 2


# -------------------------------
# 4.2. require_environment() missing or empty env vars
# -------------------------------


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': '', 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
        ({'ENV1': '', 'ENV2': ''}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_missing_or_empty(monkeypatch, env_setup, missing_names):
    """4.2. Missing or empty env vars raise MissingEnvironmentVariableError."""
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def sample_function() -> None:
        pass

    expected_message = f'Missing required environment variables: {", ".join(missing_names)}'
    with pytest.raises(MissingEnvironmentVariableError, match=expected_message):
        sample_function()


# -------------------------------
# 5. guarantee_500_response() behavior
# -------------------------------


def test_guarantee_500_response(monkeypatch):
    """5.1. Faulty lambda handler returns 500 response when not running locally."""
    monkeypatch.setattr('linkshortener.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    response = faulty_lambda_handler({}, None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body['message'] == 'Internal Server Error'
    assert body['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'


def test_guarantee_500_response_reraises_when_running_locally(monkeypatch):
    """5.2. Faulty lambda handler reraises the original exception when running locally."""
    monkeypatch.setattr('linkshortener.utils.helpers.running_locally', lambda: True)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        faulty_lambda_handler({}, None)


def test_guarantee_500_response_passes_through_responses(monkeypatch):
    """5.3. Successful responses are returned unchanged."""
    monkeypatch.setattr('linkshortener.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def lambda_handler(event, context):
        return {'statusCode': 200, 'body': '{}'}

    assert lambda_handler({}, None) == {'statusCode': 200, 'body': '{}'}
