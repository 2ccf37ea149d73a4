"""
Unit tests for the UserRedisDAO class.

Test coverage includes:

1. Lookups
   - Ensures `get_by_name()` and `get()` build a UserModel from stored keys.
   - Ensures missing users yield None.

2. Registration
   - Ensures `create()` claims the user name atomically with SET NX.
   - Ensures an existing user name raises UserAlreadyExistsError.

3. Connectivity issues
   - Confirms Redis connection errors raise DataStoreError.
"""

import re
import uuid

import pytest
import redis

from linkshortener.models import UserModel
from linkshortener.dao.exceptions import DataStoreError, UserAlreadyExistsError
from linkshortener.dao.redis import UserRedisDAO


USER_ID = '6f1c2a9e-0000-4000-8000-000000000001'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a UserRedisDAO instance with a mocked Redis client."""
    return UserRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Lookups
# -------------------------------


def test_get_by_name(dao, redis_client):
    """1.1. `get_by_name()` resolves the user ID stored under the name key."""
    redis_client.get.return_value = USER_ID

    assert dao.get_by_name('alice') == UserModel(user_id=USER_ID, name='alice')
    redis_client.get.assert_called_once_with('testapp:test:users:by-name:alice')


def test_get(dao, redis_client):
    """1.2. `get()` resolves the name stored under the user key."""
    redis_client.get.return_value = 'alice'

    assert dao.get(USER_ID) == UserModel(user_id=USER_ID, name='alice')
    redis_client.get.assert_called_once_with(f'testapp:test:users:{USER_ID}')


def test_missing_user(dao, redis_client):
    """1.3. Unknown users yield None."""
    redis_client.get.return_value = None

    assert dao.get_by_name('alice') is None
    assert dao.get(USER_ID) is None


# -------------------------------
# 2. Registration
# -------------------------------


def test_create(dao, redis_client, monkeypatch):
    """2.1. `create()` claims the name with SET NX, then stores the reverse mapping."""
    monkeypatch.setattr(uuid, 'uuid4', lambda: uuid.UUID(USER_ID))
    redis_client.set.return_value = True

    user = dao.create('alice')

    assert user == UserModel(user_id=USER_ID, name='alice')
    redis_client.set.assert_any_call('testapp:test:users:by-name:alice', USER_ID, nx=True)
    redis_client.set.assert_any_call(f'testapp:test:users:{USER_ID}', 'alice')


def test_create_existing_user(dao, redis_client):
    """2.2. Existing user names raise UserAlreadyExistsError."""
    redis_client.set.return_value = None  # SET NX on an existing key

    with pytest.raises(UserAlreadyExistsError, match=re.escape("User with name 'alice' already exists.")):
        dao.create('alice')

    assert redis_client.set.call_count == 1


# -------------------------------
# 3. Connectivity issues
# -------------------------------


def test_create_with_redis_connection_error(dao, redis_client):
    """3.1. Connection errors surface as DataStoreError."""
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        dao.create('alice')
