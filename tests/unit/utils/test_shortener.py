"""Unit tests for the generate_token function in shortener.py.

Test coverage includes:

1. Basic functionality
   - Ensures the function returns a Base62 string of the expected length.

2. Encoding of random draws
   - Known random draws map to known tokens (most significant digit first).
   - Draws larger than the token space wrap around.

3. Salting
   - Same draw + same salt yields the same token, a salt shifts the token.
   - The shift is derived from the UTF-8 bytes of the salt.

4. Error handling
   - Ensures invalid lengths and salts raise appropriate exceptions.
"""

import string
import uuid

import pytest
import xxhash
from beartype.roar import BeartypeCallHintParamViolation

from linkshortener.utils import generate_token
from linkshortener.utils.shortener import ALPHABET, BASE


def fixed_uuid(monkeypatch, value: int) -> None:
    monkeypatch.setattr(uuid, 'uuid4', lambda: uuid.UUID(int=value))


# -------------------------------
# 1. Basic functionality
# -------------------------------


@pytest.mark.parametrize('length', [1, 6, 8, 22])
def test_generate_token_length_and_alphabet(length):
    """1.1. Tokens have the requested length and only use [a-zA-Z0-9]."""
    token = generate_token(length=length)

    assert len(token) == length
    assert set(token) <= set(string.ascii_letters + string.digits)


def test_generate_token_default_length():
    """1.2. Tokens are 6 characters long by default."""
    assert len(generate_token()) == 6


def test_generate_token_is_random():
    """1.3. Consecutive tokens differ (collisions in 1000 draws are practically impossible)."""
    assert len({generate_token() for _ in range(1000)}) == 1000


# -------------------------------
# 2. Encoding of random draws
# -------------------------------


@pytest.mark.parametrize(
    'drawn, expected',
    [
        (0, 'aaaaaa'),
        (1, 'aaaaab'),
        (BASE - 1, 'aaaaa9'),
        (BASE, 'aaaaba'),
        (BASE**6 - 1, '999999'),
        (BASE**6, 'aaaaaa'),
    ],
)
def test_generate_token_encoding(monkeypatch, drawn, expected):
    """2.1. Random draws are Base62 encoded and wrapped into the token space."""
    fixed_uuid(monkeypatch, drawn)

    assert generate_token() == expected


def test_alphabet():
    """2.2. The alphabet is lowercase, uppercase, then digits."""
    assert ALPHABET[0] == 'a'
    assert ALPHABET[26] == 'A'
    assert ALPHABET[-1] == '9'
    assert BASE == 62


# -------------------------------
# 3. Salting
# -------------------------------


def test_generate_token_with_salt(monkeypatch):
    """3.1. Salts deterministically shift the token space."""
    fixed_uuid(monkeypatch, 12345)

    unsalted = generate_token()
    salted = generate_token(salt='unit_test_salt')

    assert salted == generate_token(salt='unit_test_salt')
    assert salted != unsalted
    assert salted != generate_token(salt='other_salt')


@pytest.mark.parametrize('salt', ['unit_test_salt', 'sel de mer \u00e9t\u00e9'])
def test_generate_token_salt_hashes_utf8_bytes(monkeypatch, salt):
    """3.2. The shift is the xxh64 digest of the salt's UTF-8 bytes."""
    fixed_uuid(monkeypatch, 12345)

    drawn = (12345 + xxhash.xxh64_intdigest(salt.encode('utf-8'))) % BASE**6
    expected = ''.join(reversed([ALPHABET[(drawn // BASE**i) % BASE] for i in range(6)]))

    assert generate_token(salt=salt) == expected


# -------------------------------
# 4. Error handling
# -------------------------------


@pytest.mark.parametrize('length', [0, -1])
def test_generate_token_invalid_length(length):
    """4.1. Non-positive lengths raise ValueError."""
    with pytest.raises(ValueError, match='Token length must be a positive integer'):
        generate_token(length=length)


def test_generate_token_empty_salt():
    """4.2. Empty salts raise ValueError."""
    with pytest.raises(ValueError, match='Salt must be a non-empty string'):
        generate_token(salt='')


@pytest.mark.parametrize('kwargs', [{'length': '6'}, {'length': 6.0}, {'salt': 123}])
def test_generate_token_invalid_types(kwargs):
    """4.3. Invalid argument types raise a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        generate_token(**kwargs)
