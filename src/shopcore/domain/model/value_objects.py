"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from shopcore.domain.exceptions import InvalidQuantityError, ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal and rounds to whole cents."""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        if value < 0:
            raise ValidationError(f"Money amount cannot be negative, got {value}")
        return Money(value, currency).quantized()

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    def quantized(self) -> Money:
        """Round half-up to whole cents."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise InvalidQuantityError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidQuantityError("Quantity must be positive")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Attributes(Mapping[str, str]):
    """Immutable string-to-string mapping (e.g. ``{"size": "M"}``).

    Keys are unique and order is irrelevant: pairs are kept sorted so two
    mappings with the same content compare and hash equal.
    """

    pairs: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        keys = [key for key, _ in self.pairs]
        if len(keys) != len(set(keys)):
            raise ValidationError("Attribute keys must be unique")
        for key, value in self.pairs:
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValidationError("Attribute keys and values must be strings")
        object.__setattr__(self, "pairs", tuple(sorted(self.pairs)))

    @staticmethod
    def of(mapping: Mapping[str, object] | None = None) -> Attributes:
        if not mapping:
            return Attributes()
        return Attributes(tuple((str(k), str(v)) for k, v in mapping.items()))

    def with_value(self, key: str, value: str) -> Attributes:
        updated = dict(self.pairs)
        updated[key] = value
        return Attributes.of(updated)

    def as_dict(self) -> dict[str, str]:
        return dict(self.pairs)

    # --- Mapping protocol -----------------------------------------------------

    def __getitem__(self, key: str) -> str:
        for k, v in self.pairs:
            if k == key:
                return v
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


class OwnerKind(Enum):
    USER = "user"
    SESSION = "session"


@dataclass(frozen=True)
class CartOwner:
    """Who a cart belongs to: an authenticated user or an anonymous session.

    The two identifier spaces are disjoint, so ``user:42`` and
    ``session:42`` are different carts.
    """

    kind: OwnerKind
    id: str

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValidationError("Cart owner id is required")

    @staticmethod
    def user(user_id: str) -> CartOwner:
        return CartOwner(OwnerKind.USER, user_id)

    @staticmethod
    def session(session_id: str) -> CartOwner:
        return CartOwner(OwnerKind.SESSION, session_id)

    @property
    def is_guest(self) -> bool:
        return self.kind is OwnerKind.SESSION

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
