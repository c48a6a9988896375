"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Storage faults (OSError, malformed JSON) are deliberately *not* part of this
hierarchy; they propagate untouched.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DuplicateEmailError(DomainException):
    """A user with this email is already registered."""


class UnauthenticatedError(DomainException):
    """Missing, malformed, expired or otherwise invalid session."""


class ForbiddenError(DomainException):
    """Valid session, but the caller lacks the role or does not own the resource."""


class InvalidTransitionError(DomainException):
    """The order state machine does not allow the requested status change."""


class AlreadyTerminalError(InvalidTransitionError):
    """The order has already been delivered; no further transitions."""


class InsufficientStockError(ValidationError):
    """A stock decrement would drive a product's stock below zero."""
