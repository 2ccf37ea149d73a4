import uuid

from beartype import beartype

from linkshortener.models import UserModel
from linkshortener.dao.base import UserBaseDAO
from linkshortener.dao.memory.mixins import MemoryStoreMixin
from linkshortener.dao.exceptions import UserAlreadyExistsError


class UserMemoryDAO(MemoryStoreMixin, UserBaseDAO):
    @beartype
    def get_by_name(self, name: str, **kwargs) -> UserModel | None:
        with self.store.lock:
            return self.store.users.get(name)

    @beartype
    def get(self, user_id: str, **kwargs) -> UserModel | None:
        with self.store.lock:
            if user_id not in self.store.links:
                return None
            return next((user for user in self.store.users.values() if user.user_id == user_id), None)

    @beartype
    def create(self, name: str, **kwargs) -> UserModel:
        with self.store.lock:
            if name in self.store.users:
                raise UserAlreadyExistsError(f"User with name '{name}' already exists.")

            user = UserModel(user_id=str(uuid.uuid4()), name=name)
            self.store.users[name] = user
            self.store.links[user.user_id] = {}
            self.store.commit()
        return user
