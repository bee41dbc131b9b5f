"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from shopcore.application.dto import CartDTO, cart_line_to_dto
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.value_objects import CartOwner
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.catalog_resolver import CatalogResolver
from shopcore.domain.service.order_totals import compute_subtotal


def is_line_available(resolver: CatalogResolver, line: CartLine) -> bool:
    """Can the line still be bought at its current quantity?

    False once the product is deactivated or removed, or when stock no
    longer covers the quantity.
    """
    return resolver.resolve_availability(
        line.product_id, line.variant_id, line.quantity.value
    )


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, owner: CartOwner) -> CartDTO:
        """List the cart with line totals and availability.

        ``item_count`` only counts units of products that are still
        active, matching what the storefront badge shows.
        """
        with self._uow as uow:
            resolver = CatalogResolver(uow.products, uow.variants)
            lines = uow.carts.list_for_owner(owner)

            items = []
            item_count = 0
            for line in lines:
                items.append(cart_line_to_dto(line, is_line_available(resolver, line)))
                product = uow.products.get_by_id(line.product_id)
                if product is not None and product.is_active:
                    item_count += line.quantity.value

        currency = lines[0].price.currency if lines else "USD"
        subtotal = compute_subtotal((line.line_total for line in lines), currency)
        return CartDTO(
            owner=str(owner),
            items=items,
            subtotal=str(subtotal),
            item_count=item_count,
        )
