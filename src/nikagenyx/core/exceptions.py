class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials, PINs or MFA codes are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique business key is already taken."""

    status_code = 409


class LockedError(DomainError):
    """Raised when an account is locked after too many failed attempts."""

    status_code = 423
