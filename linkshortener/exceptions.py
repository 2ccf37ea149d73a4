class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkshortener_error'


class InvariantViolationError(LinkShortenerError):
    """Raised when internal state contradicts a guarantee the service relies on.

    This indicates a bug. It aborts the current operation, never the process.
    """

    error_code = 'app:invariant_violation_error'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class ServiceError(LinkShortenerError):
    """Base exception for link lifecycle operations rejected by validation.

    Attributes:
        field (str | None):
            Name of the input field which failed, so callers can re-prompt for it.
    """

    error_code = 'service:service_error'
    field: str | None = None

    def __init__(self, message: str = '', *, field: str | None = None):
        super().__init__(message)
        if field is not None:
            self.field = field


class InvalidNameError(ServiceError):
    """Raised when a user name is empty or contains anything but letters."""

    error_code = 'service:invalid_name_error'
    field = 'name'


class UnreachableURLError(ServiceError):
    """Raised when a destination URL fails the reachability check."""

    error_code = 'service:unreachable_url_error'
    field = 'target_url'


class InvalidDurationError(ServiceError):
    """Raised when a duration text yields no usable positive duration."""

    error_code = 'service:invalid_duration_error'
    field = 'duration'


class InvalidVisitLimitError(ServiceError):
    """Raised when a visit limit is not an integer."""

    error_code = 'service:invalid_visit_limit_error'
    field = 'visit_limit'


class LinkNotFoundError(ServiceError):
    """Raised when a token is unknown, expired or out of visits."""

    error_code = 'service:link_not_found_error'
    field = 'token'


class LinkNotOwnedError(ServiceError):
    """Raised when a user operates on a link owned by someone else."""

    error_code = 'service:link_not_owned_error'
    field = 'token'


class AlreadyExpiredError(ServiceError):
    """Raised when an edit would move a link's expiry to now or the past."""

    error_code = 'service:already_expired_error'
    field = 'duration'


class TokenGenerationError(ServiceError):
    """Raised when every token generation attempt collided with an existing token."""

    error_code = 'service:token_generation_error'
    field = 'token'
