import uuid

from beartype import beartype

from linkshortener.models import UserModel
from linkshortener.dao.base import UserBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import UserAlreadyExistsError


class UserRedisDAO(RedisClientMixin, UserBaseDAO):
    @handle_redis_connection_error
    @beartype
    def get_by_name(self, name: str, **kwargs) -> UserModel | None:
        user_id = self.redis.get(self.keys.user_name_key(name))
        return None if user_id is None else UserModel(user_id=user_id, name=name)

    @handle_redis_connection_error
    @beartype
    def get(self, user_id: str, **kwargs) -> UserModel | None:
        name = self.redis.get(self.keys.user_key(user_id))
        return None if name is None else UserModel(user_id=user_id, name=name)

    @handle_redis_connection_error
    @beartype
    def create(self, name: str, **kwargs) -> UserModel:
        user_id = str(uuid.uuid4())

        # SET NX claims the name atomically: concurrent creations of the same
        # user name can't both succeed.
        if not self.redis.set(self.keys.user_name_key(name), user_id, nx=True):
            raise UserAlreadyExistsError(f"User with name '{name}' already exists.")
        self.redis.set(self.keys.user_key(user_id), name)

        return UserModel(user_id=user_id, name=name)
