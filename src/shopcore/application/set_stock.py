"""Application service: Set Stock use case.

Stand-in for the external inventory-adjustment collaborator: it is the
only writer of product/variant stock. Checkout reads stock, it never
decrements it.
"""

from __future__ import annotations

import structlog

from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class SetStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> None:
        """Set the quantity on hand of a product, or of one of its variants."""
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if variant_id is None:
                product.set_stock(quantity)
                uow.products.save(product)
            else:
                variant = uow.variants.get_by_id(variant_id)
                if variant is None or variant.product_id != product_id:
                    raise EntityNotFoundError(
                        f"Variant '{variant_id}' not found for product '{product.name}'"
                    )
                variant.set_stock(quantity)
                uow.variants.save(variant)

            uow.commit()

        logger.info(
            "stock_set",
            product_id=product_id,
            variant_id=variant_id,
            quantity=quantity,
        )
