"""Domain service: Order Assembler.

Turns checkout lines (from a cart or supplied directly) into permanent
OrderItem snapshots. It lives in the domain layer because the
snapshot and price rules are core business rules, not orchestration.

The two-phase approach (validate every line, then snapshot) guarantees
that one unavailable line fails the whole checkout before anything is
built, so there are never partial orders.

Price policy: a line that already carries a price (a cart line's
add-time snapshot, or an explicit price) keeps it; a line without one
is priced from the live catalog.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.order import OrderItem
from shopcore.domain.model.value_objects import Attributes, Money, Quantity
from shopcore.domain.service.catalog_resolver import CatalogResolver, ResolvedItem


@dataclass(frozen=True)
class CheckoutLine:
    """One line about to be ordered."""

    product_id: str
    variant_id: str | None
    quantity: Quantity
    price: Money | None = None
    attributes: Attributes | None = None
    line_id: int | None = None  # cart line id, when the line came from a cart

    @staticmethod
    def from_cart_line(line: CartLine) -> CheckoutLine:
        return CheckoutLine(
            product_id=line.product_id,
            variant_id=line.variant_id,
            quantity=line.quantity,
            price=line.price,
            attributes=line.attributes,
            line_id=line.id,
        )


class OrderAssembler:

    def __init__(self, resolver: CatalogResolver) -> None:
        self._resolver = resolver

    def assemble(self, lines: Iterable[CheckoutLine]) -> list[OrderItem]:
        """Validate availability of every line, then snapshot them all.

        Raises InsufficientStockError naming the first unavailable line;
        EntityNotFoundError if a line references an unknown variant.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError("Nothing to order")

        # Phase 1: resolve and validate every line before building anything
        resolved: list[tuple[CheckoutLine, ResolvedItem]] = []
        for line in lines:
            self._resolver.ensure_available(
                line.product_id, line.variant_id, line.quantity.value, line_id=line.line_id
            )
            resolved.append((line, self._resolver.resolve(line.product_id, line.variant_id)))

        # Phase 2: snapshot
        return [self._snapshot(line, item) for line, item in resolved]

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _snapshot(line: CheckoutLine, item: ResolvedItem) -> OrderItem:
        return OrderItem.snapshot(
            product_id=item.product.id,
            product_name=item.product_name,
            sku=item.sku,
            quantity=line.quantity,
            unit_price=line.price if line.price is not None else item.unit_price,
            variant_id=line.variant_id,
            variant_name=item.variant_name,
            weight=item.weight,
            attributes=line.attributes or item.attributes,
        )
