class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a request clashes with existing state (overlap, cap, already decided)."""


class NotFoundError(DomainError):
    """Raised when a shift, holiday, employee or tenant cannot be resolved."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AllocationExhaustedError(DomainError):
    """Raised when every shift id candidate collided with an existing row."""


class PersistenceError(DomainError):
    """Raised when the underlying store fails."""


class DuplicateKeyError(PersistenceError):
    """Raised when an insert violates a unique constraint."""
