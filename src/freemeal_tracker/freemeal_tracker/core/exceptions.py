class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an identifier does not resolve to any record."""


class InternalError(DomainError):
    """Raised on data-integrity faults (e.g. one identifier matching several people)."""


class ConcurrencyConflict(DomainError):
    """Raised by a store when a create races another in-flight create for the same key."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""
