class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRangeError(ValidationError):
    """Raised when an attendance date falls outside its session's active range."""


class AuthenticationError(DomainError):
    """Raised when credentials are invalid or no login identity is present."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an operation references an entity that does not exist."""


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""


class DuplicateAttendanceError(ConflictError):
    """Raised when a session already has an attendance record for a date."""
