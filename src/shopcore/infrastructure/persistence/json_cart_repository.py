"""JSON-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.value_objects import (
    Attributes,
    CartOwner,
    OwnerKind,
    Quantity,
)
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.infrastructure.persistence.serialization import money_from_raw, money_to_raw


class JsonCartRepository(CartRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- CartRepository interface ---------------------------------------------

    def get_by_id(self, line_id: int) -> CartLine | None:
        for raw in self._records:
            if raw["id"] == line_id:
                return self._to_domain(raw)
        return None

    def get_by_key(
        self, owner: CartOwner, product_id: str, variant_id: str | None
    ) -> CartLine | None:
        for raw in self._records:
            if self._key_of(raw) == (owner.kind.value, owner.id, product_id, variant_id):
                return self._to_domain(raw)
        return None

    def list_for_owner(self, owner: CartOwner) -> list[CartLine]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if raw["owner_kind"] == owner.kind.value and raw["owner_id"] == owner.id
        ]

    def save(self, line: CartLine) -> None:
        key = (line.owner.kind.value, line.owner.id, line.product_id, line.variant_id)

        # Unique (owner, product, variant): a second row for a key is refused
        for raw in self._records:
            if self._key_of(raw) == key and raw["id"] != line.id:
                raise ValidationError(
                    f"Cart {line.owner} already has a line for product "
                    f"'{line.product_id}' (line #{raw['id']})"
                )

        if line.id is None:
            line.id = max((raw["id"] for raw in self._records), default=0) + 1

        for i, raw in enumerate(self._records):
            if raw["id"] == line.id:
                self._records[i] = self._to_raw(line)
                return
        self._records.append(self._to_raw(line))

    def delete(self, line_id: int) -> None:
        self._records[:] = [raw for raw in self._records if raw["id"] != line_id]

    def delete_for_owner(self, owner: CartOwner) -> int:
        before = len(self._records)
        self._records[:] = [
            raw
            for raw in self._records
            if not (raw["owner_kind"] == owner.kind.value and raw["owner_id"] == owner.id)
        ]
        return before - len(self._records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _key_of(raw: dict) -> tuple:
        return (raw["owner_kind"], raw["owner_id"], raw["product_id"], raw.get("variant_id"))

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "id": line.id,
            "owner_kind": line.owner.kind.value,
            "owner_id": line.owner.id,
            "product_id": line.product_id,
            "variant_id": line.variant_id,
            "quantity": line.quantity.value,
            "price": money_to_raw(line.price),
            "currency": line.price.currency,
            "attributes": line.attributes.as_dict(),
            "added_at": line.added_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine(
            id=raw["id"],
            owner=CartOwner(OwnerKind(raw["owner_kind"]), raw["owner_id"]),
            product_id=raw["product_id"],
            variant_id=raw.get("variant_id"),
            quantity=Quantity(raw["quantity"]),
            price=money_from_raw(raw["price"], raw.get("currency", "USD")),
            attributes=Attributes.of(raw.get("attributes")),
            added_at=datetime.fromisoformat(raw["added_at"]),
        )
