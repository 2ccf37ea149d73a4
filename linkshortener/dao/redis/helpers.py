"""Helpers shared by the Redis DAOs.

Functions:
    redis_location(client) -> str
        `host:port/db` of a client's connection pool, used in error messages.
    handle_redis_connection_error(method) -> Callable
        Decorator: re-raise Redis connectivity failures as DataStoreError.
"""

import functools
from collections.abc import Callable

import redis

from linkshortener.dao.exceptions import DataStoreError


__all__ = ['redis_location', 'handle_redis_connection_error']

# Failures meaning "Redis is unavailable", as opposed to bad commands or data
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def redis_location(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable](method: F) -> F:
    """Wrap a Redis DAO method so connectivity failures surface as DataStoreError

    The service layer only knows DAO exceptions. Any other Redis error (e.g. a
    WRONGTYPE reply) is a bug and propagates unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def find(self, token):
        ...     return self.redis.hgetall(self.keys.link_key(token))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper
