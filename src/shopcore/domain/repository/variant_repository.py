"""Abstract repository for ProductVariant entities."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.model.product import ProductVariant


class VariantRepository(ABC):

    @abstractmethod
    def get_by_id(self, variant_id: str) -> ProductVariant | None:
        """Return a variant by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> ProductVariant | None:
        """Return the variant with this SKU, or None."""

    @abstractmethod
    def list_all(self) -> list[ProductVariant]:
        """Return every variant in the catalog."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[ProductVariant]:
        """Return the variants owned by a product."""

    @abstractmethod
    def save(self, variant: ProductVariant) -> None:
        """Persist a new or updated variant."""
