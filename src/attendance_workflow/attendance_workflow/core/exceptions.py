class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a machine-checkable ``kind`` and the HTTP status
    the controller layer maps it to.
    """

    kind = "domain_error"
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when no verified identity is attached to the request."""

    kind = "unauthorized"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"
    http_status = 403


class NotFoundError(DomainError):
    kind = "not_found"
    http_status = 404


class ConflictError(DomainError):
    """Uniqueness violation or a second decision on a terminal reason."""

    kind = "conflict"
    http_status = 409


class StorageError(DomainError):
    """Storage failure. The transaction was rolled back; callers may retry."""

    kind = "internal_error"
    http_status = 500
    retryable = True
