"""Application service: Update Cart Item quantity use case."""

from __future__ import annotations

import structlog

from shopcore.application.dto import CartLineDTO, cart_line_to_dto
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.value_objects import CartOwner, Quantity
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.catalog_resolver import CatalogResolver

logger = structlog.get_logger(__name__)


class UpdateCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        line_id: int,
        quantity: int,
        owner: CartOwner | None = None,
    ) -> CartLineDTO:
        """Set a line's quantity.

        A quantity below one is rejected with InvalidQuantityError; callers
        that want the line gone must remove it explicitly. A quantity beyond
        current stock raises InsufficientStockError. When ``owner``
        is given, another owner's line is reported as not found.
        """
        qty = Quantity(quantity)

        with self._uow as uow:
            line = uow.carts.get_by_id(line_id)
            if line is None or (owner is not None and line.owner != owner):
                raise EntityNotFoundError(f"Cart line #{line_id} not found")

            CatalogResolver(uow.products, uow.variants).ensure_available(
                line.product_id, line.variant_id, qty.value, line_id=line_id
            )
            line.change_quantity(qty)
            uow.carts.save(line)
            uow.commit()

        logger.info("cart_item_updated", line_id=line_id, quantity=quantity)
        return cart_line_to_dto(line)
