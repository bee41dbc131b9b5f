"""Abstract repository for cart lines.

Implementations must treat (owner, product_id, variant_id) as a unique
key: ``save`` of a *new* line whose key already exists is an error, so
the merge rule cannot be bypassed by a racing writer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.value_objects import CartOwner


class CartRepository(ABC):

    @abstractmethod
    def get_by_id(self, line_id: int) -> CartLine | None:
        """Return a cart line by its ID, or None if not found."""

    @abstractmethod
    def get_by_key(
        self, owner: CartOwner, product_id: str, variant_id: str | None
    ) -> CartLine | None:
        """Return the owner's line for (product, variant), or None."""

    @abstractmethod
    def list_for_owner(self, owner: CartOwner) -> list[CartLine]:
        """Return all lines in the owner's cart, oldest first."""

    @abstractmethod
    def save(self, line: CartLine) -> None:
        """Persist a new or updated line (assigns ``id`` to new lines)."""

    @abstractmethod
    def delete(self, line_id: int) -> None:
        """Remove a single line."""

    @abstractmethod
    def delete_for_owner(self, owner: CartOwner) -> int:
        """Remove every line of the owner's cart; return how many."""
