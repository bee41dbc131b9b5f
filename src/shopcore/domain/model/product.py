"""Catalog aggregates: Product and its ProductVariants.

Products live independently of carts and orders. They have their own
lifecycle: prices change, stock is adjusted, products are renamed and
deactivated. The checkout core only *reads* them; carts and orders keep
their own snapshots.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from slugify import slugify

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.value_objects import Attributes, Money


def derive_slug(name: str) -> str:
    """URL slug for a product name (lower-case, ASCII, hyphen separated)."""
    slug = slugify(name)
    if not slug:
        raise ValidationError(f"Cannot derive a slug from name {name!r}")
    return slug


def derive_variant_sku(parent_sku: str, variant_name: str) -> str:
    """Default SKU for a variant: ``PARENT-variant-name``."""
    suffix = re.sub(r"\s+", "-", variant_name.strip().lower())
    return f"{parent_sku}-{suffix}"


def parse_weight(raw: str | None) -> Decimal | None:
    """Parse an optional shipping weight; blank means no weight."""
    if raw is None or not str(raw).strip():
        return None
    try:
        weight = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid weight: {raw!r}") from exc
    if not weight.is_finite() or weight < 0:
        raise ValidationError(f"Invalid weight: {raw!r}")
    return weight


def _require_positive_price(price: Money) -> None:
    if price.amount <= 0:
        raise ValidationError("Product price must be greater than zero")


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root that owns its variants (held separately
    in the variant repository, keyed by ``product_id``).
    """

    id: str
    name: str
    sku: str
    price: Money
    slug: str = ""
    compare_at_price: Money | None = None
    cost_price: Money | None = None
    quantity: int = 0
    track_quantity: bool = True
    is_active: bool = True
    weight: Decimal | None = None

    def __post_init__(self) -> None:
        _require_positive_price(self.price)
        if not self.slug:
            self.slug = derive_slug(self.name)

    # --- Catalog management ---------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing cart line or order item because
        both capture a price snapshot.
        """
        _require_positive_price(new_price)
        self.price = new_price

    def rename(self, new_name: str, slug: str | None = None) -> None:
        """Rename the product, regenerating the slug unless one is given."""
        if not new_name or not new_name.strip():
            raise ValidationError("Product name is required")
        self.name = new_name.strip()
        self.slug = slug if slug else derive_slug(self.name)

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.quantity = quantity

    def deactivate(self) -> None:
        self.is_active = False

    # --- Queries --------------------------------------------------------------

    @property
    def is_in_stock(self) -> bool:
        if not self.track_quantity:
            return True
        return self.quantity > 0

    @property
    def is_on_sale(self) -> bool:
        return self.compare_at_price is not None and self.compare_at_price > self.price


@dataclass
class ProductVariant:
    """A priced, stocked sub-SKU of a product (e.g. size M / colour red).

    The variant price is independent of the parent's price and its stock
    is tracked on the variant itself.
    """

    id: str
    product_id: str
    name: str
    sku: str
    price: Money
    quantity: int = 0
    weight: Decimal | None = None
    attributes: Attributes = field(default_factory=Attributes)

    def __post_init__(self) -> None:
        _require_positive_price(self.price)

    @staticmethod
    def create(
        id: str,
        product: Product,
        name: str,
        price: Money,
        sku: str | None = None,
        quantity: int = 0,
        weight: Decimal | None = None,
        attributes: Attributes | None = None,
    ) -> ProductVariant:
        """Build a new variant, deriving its SKU from the parent if needed."""
        if not name or not name.strip():
            raise ValidationError("Variant name is required")
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        return ProductVariant(
            id=id,
            product_id=product.id,
            name=name.strip(),
            sku=sku or derive_variant_sku(product.sku, name),
            price=price,
            quantity=quantity,
            weight=weight,
            attributes=attributes or Attributes(),
        )

    def get_attribute(self, key: str) -> str | None:
        return self.attributes.get(key)

    def set_attribute(self, key: str, value: str) -> None:
        self.attributes = self.attributes.with_value(key, value)

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.quantity = quantity

    @property
    def is_in_stock(self) -> bool:
        return self.quantity > 0
