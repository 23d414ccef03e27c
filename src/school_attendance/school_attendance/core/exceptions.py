class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced section, student or record does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with existing data (e.g. attendance already marked)."""


class RecordFetchError(DomainError):
    """Raised by the record store when attendance rows could not be loaded."""
