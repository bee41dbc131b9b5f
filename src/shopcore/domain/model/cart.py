"""CartLine: one transient entry in a shopping cart.

A cart is not an object of its own: it is the set of lines sharing a
``CartOwner``. Each line snapshots the unit price at the moment it was
added, so later catalog re-pricing never changes what is in the cart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from shopcore.domain.model.value_objects import Attributes, CartOwner, Money, Quantity

CartKey = tuple[CartOwner, str, str | None]


@dataclass
class CartLine:
    """A (product, variant, quantity, snapshotted price) entry.

    Invariant: quantity is always >= 1. Removing a line is an explicit
    delete, never a zero-quantity row.
    """

    id: int | None
    owner: CartOwner
    product_id: str
    variant_id: str | None
    quantity: Quantity
    price: Money  # snapshot taken at add-time
    attributes: Attributes = field(default_factory=Attributes)
    added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> CartKey:
        return (self.owner, self.product_id, self.variant_id)

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value

    def increase(self, quantity: Quantity) -> None:
        """Merge another add of the same item into this line."""
        self.quantity = self.quantity + quantity

    def change_quantity(self, quantity: Quantity) -> None:
        self.quantity = quantity

    def reassign(self, owner: CartOwner) -> None:
        """Move the line to another cart (guest -> user on login)."""
        self.owner = owner
