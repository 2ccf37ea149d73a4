"""Short token generation utility

This module provides a helper function for minting short, fixed-length,
uniformly random tokens used as the path segment of short links.

Functions:
    generate_token(length=6, salt=None):
        Draw a random Base62 token of the given length.

Example:
    >>> from linkshortener.utils import generate_token
    >>> generate_token()
    'Gh71WP'
    >>> len(generate_token(length=8, salt='my_secret'))
    8
"""

import string
import uuid

import xxhash
from beartype import beartype

from linkshortener.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


@beartype
def generate_token(length: int = Defaults.TOKEN_LENGTH, salt: str | None = None) -> str:
    """Generate a fixed-length random token.

    The token is drawn from a 128-bit random UUID and reduced into the fixed
    Base62 space of `BASE**length` values. An optional salt shifts every draw by
    a constant offset, giving each deployment its own token namespace while
    keeping the distribution uniform.

    Args:
        length (int, optional):
            Exact length of the resulting token. Defaults to 6.

        salt (str | None, optional):
            Secret string used to offset the token space.
            Defaults to None (no offset).

    Returns:
        str: A random alphanumeric token of exactly `length` characters.

    Raises:
        ValueError:
            If `length` is not positive or `salt` is an empty string.

    NOTE:
        - Uniqueness is NOT checked here. With 62**6 (~5.7e10) values,
          collisions are rare but possible; the link store rejects duplicates
          and the caller generates a new token.
        - The alphabet is Base62 safe: [a-zA-Z0-9].
        - Uses ultra-fast xxhash for hashing the salt.
    """
    if length <= 0:
        raise ValueError(f'Token length must be a positive integer (given value: {length}).')
    if salt is not None and not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt!r}).')

    modulo_space = BASE**length
    drawn = uuid.uuid4().int % modulo_space
    if salt is not None:
        drawn = (drawn + xxhash.xxh64_intdigest(salt.encode())) % modulo_space

    # Encode into base62, most significant digit first. The comprehension always
    # emits `length` digits, so the token is left-padded with ALPHABET[0].
    return ''.join(reversed([ALPHABET[(drawn // BASE**i) % BASE] for i in range(length)]))
