"""Abstract base class for user data access objects (DAOs).

Users are keyed by a unique name and identified by a stable UUID. They are
created on first authentication and never deleted.

Example:
    >>> dao = UserMemoryDAO(...)
    >>> alice = dao.create('alice')
    >>> dao.get_by_name('alice') == alice
    True
    >>> dao.get(alice.user_id) == alice
    True
"""

from abc import ABC, abstractmethod

from linkshortener.models import UserModel


class UserBaseDAO(ABC):
    """Interface for user data access objects (DAOs)

    Methods:
        get_by_name(name: str) -> UserModel | None:
            Retrieve a user by name.

        get(user_id: str) -> UserModel | None:
            Retrieve a user by identifier.

        create(name: str) -> UserModel:
            Create a user with a fresh UUID.
            Raises UserAlreadyExistsError if the name is taken.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def get_by_name(self, name: str, **kwargs) -> UserModel | None:
        pass

    @abstractmethod
    def get(self, user_id: str, **kwargs) -> UserModel | None:
        pass

    @abstractmethod
    def create(self, name: str, **kwargs) -> UserModel:
        """Create a new user.

        Args:
            name (str):
                Unique user name.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UserModel: the created user.

        Raises:
            UserAlreadyExistsError:
                If a user with this name already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
