"""Domain service: Catalog Resolver.

Answers "what would buying N units of (product, variant) cost right
now, and is it available?". It is a pure read over the product and
variant repositories, shared by the cart (to snapshot a price at
add-time) and by checkout (to re-validate stock at commit time).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shopcore.domain.exceptions import EntityNotFoundError, InsufficientStockError
from shopcore.domain.model.product import Product, ProductVariant
from shopcore.domain.model.value_objects import Attributes, Money
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.repository.variant_repository import VariantRepository


@dataclass(frozen=True)
class ResolvedItem:
    """Current catalog view of a (product, variant) pair."""

    product: Product
    variant: ProductVariant | None

    @property
    def unit_price(self) -> Money:
        return self.variant.price if self.variant else self.product.price

    @property
    def product_name(self) -> str:
        return self.product.name

    @property
    def variant_name(self) -> str | None:
        return self.variant.name if self.variant else None

    @property
    def sku(self) -> str:
        return self.variant.sku if self.variant else self.product.sku

    @property
    def weight(self) -> Decimal | None:
        if self.variant and self.variant.weight is not None:
            return self.variant.weight
        return self.product.weight

    @property
    def attributes(self) -> Attributes:
        return self.variant.attributes if self.variant else Attributes()

    @property
    def stock(self) -> int:
        return self.variant.quantity if self.variant else self.product.quantity

    def is_available(self, quantity: int) -> bool:
        if not self.product.is_active:
            return False
        if not self.product.track_quantity:
            return True
        return self.stock >= quantity


class CatalogResolver:

    def __init__(
        self,
        product_repo: ProductRepository,
        variant_repo: VariantRepository,
    ) -> None:
        self._product_repo = product_repo
        self._variant_repo = variant_repo

    def resolve(self, product_id: str, variant_id: str | None = None) -> ResolvedItem:
        """Load an active product and, if requested, one of its variants.

        Raises EntityNotFoundError if the product is missing or inactive,
        or if ``variant_id`` does not name a variant of that product.
        """
        product = self._active_product(product_id)
        if variant_id is None:
            return ResolvedItem(product=product, variant=None)

        variant = self._variant_repo.get_by_id(variant_id)
        if variant is None or variant.product_id != product.id:
            raise EntityNotFoundError(
                f"Variant '{variant_id}' not found for product '{product.name}'"
            )
        return ResolvedItem(product=product, variant=variant)

    def resolve_price(self, product_id: str, variant_id: str | None = None) -> Money:
        """Current unit price: the variant's if it exists, else the product's."""
        product = self._active_product(product_id)
        if variant_id is not None:
            variant = self._variant_repo.get_by_id(variant_id)
            if variant is not None and variant.product_id == product.id:
                return variant.price
        return product.price

    def resolve_availability(
        self,
        product_id: str,
        variant_id: str | None,
        quantity: int,
    ) -> bool:
        """True if ``quantity`` units can be sold right now.

        Untracked products are always available. Variant stock is checked
        against the variant's own quantity, not the parent's. A missing
        or deactivated product is simply unavailable.
        """
        try:
            resolved = self.resolve(product_id, variant_id)
        except EntityNotFoundError:
            return False
        return resolved.is_available(quantity)

    def ensure_available(
        self,
        product_id: str,
        variant_id: str | None,
        quantity: int,
        line_id: int | None = None,
    ) -> None:
        """Raise InsufficientStockError unless ``quantity`` units can be sold."""
        if self.resolve_availability(product_id, variant_id, quantity):
            return
        target = f"product '{product_id}'"
        if variant_id:
            target += f" variant '{variant_id}'"
        if line_id is not None:
            target = f"cart line #{line_id} ({target})"
        raise InsufficientStockError(
            f"Insufficient stock for {target} (need {quantity})",
            product_id=product_id,
            variant_id=variant_id,
            line_id=line_id,
            requested=quantity,
        )

    # --- Internal helpers -----------------------------------------------------

    def _active_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product
