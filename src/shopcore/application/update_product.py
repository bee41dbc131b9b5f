"""Application service: Update Product use cases (price, name, activity).

None of these affect existing carts or orders; both captured a
snapshot of what they need.
"""

from __future__ import annotations

import structlog

from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        new_name: str | None = None,
        new_slug: str | None = None,
        deactivate: bool = False,
    ) -> Product:
        """Update a product's price, name (and slug) or deactivate it."""
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if new_price is not None:
                product.update_price(Money.of(new_price))
            if new_name is not None:
                product.rename(new_name, slug=new_slug)
                clash = uow.products.get_by_slug(product.slug)
                if clash is not None and clash.id != product.id:
                    raise ValidationError(f"Slug '{product.slug}' already exists")
            if deactivate:
                product.deactivate()

            uow.products.save(product)
            uow.commit()

        logger.info("product_updated", product_id=product_id)
        return product
