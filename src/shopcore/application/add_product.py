"""Application service: Add Product and Add Variant use cases.

Catalog management sits outside the checkout core; these handlers
exist so a catalog can be seeded and to enforce SKU/slug uniqueness.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.product import Product, ProductVariant, parse_weight
from shopcore.domain.model.value_objects import Attributes, Money
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


def _next_id(existing_ids: list[str]) -> str:
    numeric = [int(i) for i in existing_ids if i.isdigit()]
    return str(max(numeric) + 1) if numeric else "1"


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        name: str,
        sku: str,
        price: str,
        quantity: int = 0,
        track_quantity: bool = True,
        compare_at_price: str | None = None,
        cost_price: str | None = None,
        weight: str | None = None,
        slug: str | None = None,
    ) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

        with self._uow as uow:
            if uow.products.get_by_sku(sku) is not None or uow.variants.get_by_sku(sku) is not None:
                raise ValidationError(f"SKU '{sku}' already exists")

            # Auto-assign ID based on existing products
            next_id = _next_id([p.id for p in uow.products.list_all()])
            product = Product(
                id=next_id,
                name=name.strip(),
                sku=sku.strip(),
                price=Money.of(price),
                slug=slug or "",
                compare_at_price=Money.of(compare_at_price) if compare_at_price else None,
                cost_price=Money.of(cost_price) if cost_price else None,
                quantity=quantity,
                track_quantity=track_quantity,
                weight=parse_weight(weight),
            )
            if uow.products.get_by_slug(product.slug) is not None:
                raise ValidationError(f"Slug '{product.slug}' already exists")

            uow.products.save(product)
            uow.commit()

        logger.info("product_added", product_id=product.id, sku=product.sku)
        return product


class AddVariantHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        product_id: str,
        name: str,
        price: str,
        quantity: int = 0,
        sku: str | None = None,
        weight: str | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> ProductVariant:
        """Add a variant; its SKU defaults to ``PARENT-variant-name``."""
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            variant = ProductVariant.create(
                id=_next_id([v.id for v in uow.variants.list_all()]),
                product=product,
                name=name,
                price=Money.of(price),
                sku=sku,
                quantity=quantity,
                weight=parse_weight(weight),
                attributes=Attributes.of(attributes),
            )
            if (
                uow.variants.get_by_sku(variant.sku) is not None
                or uow.products.get_by_sku(variant.sku) is not None
            ):
                raise ValidationError(f"SKU '{variant.sku}' already exists")

            uow.variants.save(variant)
            uow.commit()

        logger.info(
            "variant_added",
            product_id=product_id,
            variant_id=variant.id,
            sku=variant.sku,
        )
        return variant
