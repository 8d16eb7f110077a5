class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a login token does not resolve to a known identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AlreadySubmittedError(ValidationError):
    """Raised when a site already submitted its roster for an event."""


class ImportFormatError(ValidationError):
    """Raised when an import document cannot be applied."""


class StorageError(Exception):
    """Base exception for the durable key/value store."""


class StorageQuotaExceeded(StorageError):
    """Raised when a write would exceed the store's capacity."""


class StoreUnavailable(StorageError):
    """Raised when the durable store cannot be reached."""
