"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkAlreadyExistsError:
        Raised when inserting a link whose token is already taken (token collision).

    LinkDoesNotExistError:
        Raised when a link is not found in the data store.

    UserAlreadyExistsError:
        Raised when creating a user whose name is already taken.

    UserDoesNotExistError:
        Raised when a user is not found in the data store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, I/O, etc.).

    SnapshotFormatError:
        Raised when a persisted snapshot does not match the expected schema.

Example:
    >>> from linkshortener.dao.exceptions import LinkAlreadyExistsError
    >>> raise LinkAlreadyExistsError("Link with token 'abc123' already exists.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.LinkAlreadyExistsError: Link with token 'abc123' already exists.
"""

from linkshortener.exceptions import LinkShortenerError


class DAOError(LinkShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class LinkAlreadyExistsError(DAOError):
    """Raised when inserting a LinkModel whose token already exists in the data store."""

    error_code = 'dao:link_already_exists_error'


class LinkDoesNotExistError(DAOError):
    """Raised when a LinkModel is not found in the data store."""

    error_code = 'dao:link_does_not_exist_error'


class UserAlreadyExistsError(DAOError):
    """Raised when creating a user whose name already exists in the data store."""

    error_code = 'dao:user_already_exists_error'


class UserDoesNotExistError(DAOError):
    """Raised when a user is not found in the data store."""

    error_code = 'dao:user_does_not_exist_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts and file system failures.
    """

    error_code = 'dao:data_store_error'


class SnapshotFormatError(DAOError):
    """Raised when a persisted snapshot does not match the expected schema."""

    error_code = 'dao:snapshot_format_error'
