"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer (or any other caller) can catch them uniformly and display
user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidQuantityError(ValidationError):
    """A cart or order quantity was below one."""


class InsufficientStockError(ValidationError):
    """A line cannot be fulfilled from current stock.

    Carries the identity of the offending line so callers can point the
    customer at it.
    """

    def __init__(
        self,
        message: str,
        *,
        product_id: str,
        variant_id: str | None = None,
        line_id: int | None = None,
        requested: int = 0,
    ) -> None:
        super().__init__(message)
        self.product_id = product_id
        self.variant_id = variant_id
        self.line_id = line_id
        self.requested = requested


class InconsistentTotalsError(DomainException):
    """An order's monetary aggregates do not add up."""


class TransactionFailureError(DomainException):
    """The backing store could not commit a unit of work."""
