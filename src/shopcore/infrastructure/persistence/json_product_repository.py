"""JSON-backed implementations of ProductRepository and VariantRepository.

Both operate on a collection (list of dicts) inside the unit of work's
working document; nothing touches the file until the unit of work
commits.
"""

from __future__ import annotations

from shopcore.domain.model.product import Product, ProductVariant
from shopcore.domain.model.value_objects import Attributes
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.repository.variant_repository import VariantRepository
from shopcore.infrastructure.persistence.serialization import (
    decimal_from_raw,
    decimal_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._find(lambda raw: raw["id"] == product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        return self._find(lambda raw: raw["sku"].lower() == sku.lower())

    def get_by_slug(self, slug: str) -> Product | None:
        return self._find(lambda raw: raw["slug"] == slug)

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    def _find(self, predicate) -> Product | None:
        for raw in self._records:
            if predicate(raw):
                return self._to_domain(raw)
        return None

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "sku": product.sku,
            "price": money_to_raw(product.price),
            "currency": product.price.currency,
            "compare_at_price": money_to_raw(product.compare_at_price),
            "cost_price": money_to_raw(product.cost_price),
            "quantity": product.quantity,
            "track_quantity": product.track_quantity,
            "is_active": product.is_active,
            "weight": decimal_to_raw(product.weight),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        return Product(
            id=raw["id"],
            name=raw["name"],
            slug=raw["slug"],
            sku=raw["sku"],
            price=money_from_raw(raw["price"], currency),
            compare_at_price=money_from_raw(raw.get("compare_at_price"), currency),
            cost_price=money_from_raw(raw.get("cost_price"), currency),
            quantity=raw.get("quantity", 0),
            track_quantity=raw.get("track_quantity", True),
            is_active=raw.get("is_active", True),
            weight=decimal_from_raw(raw.get("weight")),
        )


class JsonVariantRepository(VariantRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- VariantRepository interface ------------------------------------------

    def get_by_id(self, variant_id: str) -> ProductVariant | None:
        for raw in self._records:
            if raw["id"] == variant_id:
                return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> ProductVariant | None:
        for raw in self._records:
            if raw["sku"].lower() == sku.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[ProductVariant]:
        return [self._to_domain(raw) for raw in self._records]

    def list_for_product(self, product_id: str) -> list[ProductVariant]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if raw["product_id"] == product_id
        ]

    def save(self, variant: ProductVariant) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == variant.id:
                self._records[i] = self._to_raw(variant)
                return
        self._records.append(self._to_raw(variant))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(variant: ProductVariant) -> dict:
        return {
            "id": variant.id,
            "product_id": variant.product_id,
            "name": variant.name,
            "sku": variant.sku,
            "price": money_to_raw(variant.price),
            "currency": variant.price.currency,
            "quantity": variant.quantity,
            "weight": decimal_to_raw(variant.weight),
            "attributes": variant.attributes.as_dict(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> ProductVariant:
        return ProductVariant(
            id=raw["id"],
            product_id=raw["product_id"],
            name=raw["name"],
            sku=raw["sku"],
            price=money_from_raw(raw["price"], raw.get("currency", "USD")),
            quantity=raw.get("quantity", 0),
            weight=decimal_from_raw(raw.get("weight")),
            attributes=Attributes.of(raw.get("attributes")),
        )
