class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"
    http_status = 400


class NotFoundError(DomainError):
    """Raised when a student, placement or attendance record does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class PreconditionFailedError(DomainError):
    """Raised when the current state does not allow the requested transition."""

    code = "PRECONDITION_FAILED"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_FAILED"
    http_status = 422


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    http_status = 403


class ConflictError(DomainError):
    """Raised when the store rejects a write on its uniqueness constraint."""

    code = "CONFLICT"
    http_status = 409
