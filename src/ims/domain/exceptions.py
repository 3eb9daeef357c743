"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each exception carries an ``ErrorKind`` and a ``retryable`` flag so callers
can tell "try again" apart from "change your request" without inspecting
the exception class.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = ("VALIDATION", 400)
    NOT_FOUND = ("NOT_FOUND", 404)
    CONFLICT = ("CONFLICT", 409)
    INSUFFICIENT_STOCK = ("INSUFFICIENT_STOCK", 409)
    EXPIRED_RESERVATION = ("EXPIRED_RESERVATION", 410)
    CONCURRENT_CONFLICT = ("CONCURRENT_CONFLICT", 503)

    def __init__(self, label: str, status_code: int) -> None:
        self.label = label
        self.status_code = status_code


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION
    retryable: bool = False


class ValidationError(DomainException):
    """Malformed or missing input, or a business invariant was violated."""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainException):
    """A referenced product, reservation or order does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainException):
    """Duplicate creation, e.g. a product name that is already taken."""

    kind = ErrorKind.CONFLICT


class InsufficientStockError(DomainException):
    """Not enough available stock to satisfy a reservation."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"Out of stock. Your quantity: {requested}, Available: {available}"
        )
        self.requested = requested
        self.available = available


class ExpiredReservationError(DomainException):
    """The hold lapsed before it was confirmed; a fresh reserve is needed."""

    kind = ErrorKind.EXPIRED_RESERVATION


class ConcurrentConflictError(DomainException):
    """Optimistic-lock contention outlasted the retry budget."""

    kind = ErrorKind.CONCURRENT_CONFLICT
    retryable = True


# ---------------------------------------------------------------------------
# Store-level errors.  Raised below the application layer and translated
# (or retried) by the handlers; they never reach the CLI.
# ---------------------------------------------------------------------------


class ConcurrentModificationError(DomainException):
    """A conditional write lost the race: the row version moved on."""

    kind = ErrorKind.CONCURRENT_CONFLICT
    retryable = True

    def __init__(self, entity: str, key: str, expected: int, actual: int | None) -> None:
        super().__init__(
            f"{entity} '{key}' was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        self.entity = entity
        self.key = key
        self.expected = expected
        self.actual = actual


class StaleStateError(DomainException):
    """A status transition found the row in a different state than expected."""

    kind = ErrorKind.CONFLICT

    def __init__(self, reservation_id: str, expected, actual) -> None:
        super().__init__(
            f"Reservation '{reservation_id}' is {actual.value}, "
            f"expected {expected.value}"
        )
        self.reservation_id = reservation_id
        self.expected = expected
        self.actual = actual


class DuplicateIdentifierError(ConflictError):
    """A freshly generated identifier is already taken."""


def to_error_response(exc: DomainException) -> dict:
    """Boundary payload for a domain error."""
    return {
        "message": str(exc),
        "error_code": exc.kind.status_code,
        "kind": exc.kind.label,
        "retryable": exc.retryable,
    }
