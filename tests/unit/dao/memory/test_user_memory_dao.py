"""
Unit tests for the UserMemoryDAO class.

Test coverage includes:

1. Registration
   - Ensures `create()` assigns a UUID and an empty link collection.
   - Ensures an existing user name raises UserAlreadyExistsError.

2. Lookups
   - Ensures users are found by name and by ID.
   - Ensures unknown users yield None.
"""

import re
import uuid

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from linkshortener.dao.exceptions import UserAlreadyExistsError


# -------------------------------
# 1. Registration
# -------------------------------


def test_create(user_dao, datastore):
    """1.1. New users get a UUID and an empty link collection."""
    user = user_dao.create('alice')

    assert user.name == 'alice'
    assert uuid.UUID(user.user_id).version == 4
    assert datastore.links[user.user_id] == {}


def test_create_existing_user(user_dao, alice):
    """1.2. Existing user names raise UserAlreadyExistsError."""
    with pytest.raises(UserAlreadyExistsError, match=re.escape("User with name 'alice' already exists.")):
        user_dao.create('alice')


def test_create_with_invalid_type(user_dao):
    """1.3. Non-string names raise a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        user_dao.create(42)


# -------------------------------
# 2. Lookups
# -------------------------------


def test_get_by_name_and_id(user_dao, alice, bob):
    """2.1. Users are found by name and by ID."""
    assert user_dao.get_by_name('alice') == alice
    assert user_dao.get(bob.user_id) == bob


def test_missing_user(user_dao):
    """2.2. Unknown users yield None."""
    assert user_dao.get_by_name('carol') is None
    assert user_dao.get('u-missing') is None
