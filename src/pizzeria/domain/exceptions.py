"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or state transition was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PurchaseNotFoundError(EntityNotFoundError):
    """No purchase matches the request (absent, or not in the expected state)."""


class InvariantViolationError(DomainException):
    """Persisted state breaks a uniqueness invariant.

    Raised when more than one DRAFT or PLACED purchase is found for a
    customer.  This points at store corruption or a missed guard and is
    surfaced as-is, never auto-corrected.
    """


class TooManyOrdersError(InvariantViolationError):
    """More than one draft purchase found while confirming."""
