"""Application service: Add Cart Item use case.

The merge-or-create decision runs inside one unit of work, so two adds
of the same (owner, product, variant) can never produce two lines.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from shopcore.application.dto import CartLineDTO, cart_line_to_dto
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.value_objects import Attributes, CartOwner, Money, Quantity
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.catalog_resolver import CatalogResolver

logger = structlog.get_logger(__name__)


class AddCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        owner: CartOwner,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
        price: str | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> CartLineDTO:
        """Add an item to the owner's cart.

        Without an explicit ``price`` the current catalog price is
        snapshotted (variant price wins over product price). If the cart
        already holds this (product, variant), its quantity is increased
        and its original price snapshot is kept. The resulting quantity
        must be in stock, otherwise InsufficientStockError is raised.
        """
        qty = Quantity(quantity)

        with self._uow as uow:
            resolver = CatalogResolver(uow.products, uow.variants)
            resolved = resolver.resolve(product_id, variant_id)

            line = uow.carts.get_by_key(owner, product_id, variant_id)
            merged = line is not None
            wanted = (line.quantity + qty) if line is not None else qty
            resolver.ensure_available(
                product_id,
                variant_id,
                wanted.value,
                line_id=line.id if line is not None else None,
            )
            if line is not None:
                line.increase(qty)
            else:
                line = CartLine(
                    id=None,
                    owner=owner,
                    product_id=product_id,
                    variant_id=variant_id,
                    quantity=qty,
                    price=Money.of(price) if price is not None else resolved.unit_price,
                    attributes=Attributes.of(attributes) if attributes else resolved.attributes,
                )

            uow.carts.save(line)
            uow.commit()

        logger.info(
            "cart_item_added",
            owner=str(owner),
            line_id=line.id,
            product_id=product_id,
            variant_id=variant_id,
            quantity=line.quantity.value,
            merged=merged,
        )
        return cart_line_to_dto(line)
