"""Redis client setup shared by LinkRedisDAO and UserRedisDAO.

A service builds its user DAO from connection parameters and hands that DAO's
client to the link DAO, so both share one connection pool and one key prefix:

    >>> users = UserRedisDAO(redis_host='localhost', prefix='linkshortener:prod')
    >>> links = LinkRedisDAO(redis_client=users.redis, prefix='linkshortener:prod')
"""

import redis

from linkshortener.dao.redis.helpers import CONNECTIVITY_ERRORS, redis_location
from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client and key schema of a Redis-backed DAO.

    Attributes:
        redis (redis.Redis):
            Client used for every command. Responses are decoded to str unless
            the client was built with `redis_decode_responses=False`.
        keys (RedisKeySchema):
            Namespaced key names (`<prefix>:links:<token>`, ...).
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Use `redis_client` if given, else connect with the `redis_*` parameters.

        Ports and database indexes may be given as strings (as read from
        configuration documents).

        Raises:
            DataStoreError:
                If Redis does not answer the initial PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis.

        Returns:
            bool: True if Redis answered. False on failure when `raise_error` is False.

        Raises:
            DataStoreError:
                On failure when `raise_error` is True.
        """
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
