from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.VALIDATION


class NotAuthenticatedError(DomainError):
    """Raised when an operation runs without an active session."""

    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self, message: str = "No user logged in"):
        super().__init__(message)


class StoreError(DomainError):
    """Raised when the database rejects or fails a read/write."""

    kind = ErrorKind.STORE
