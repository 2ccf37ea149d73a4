from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.redis.link_redis_dao import LinkRedisDAO
from linkshortener.dao.redis.user_redis_dao import UserRedisDAO
from linkshortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'LinkRedisDAO',
    'UserRedisDAO',
    'RedisClientMixin',
]
