"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any web layer) and the application
layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.order import Order, OrderItem


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: an item supplied directly to checkout instead of a cart line."""

    product_id: str
    quantity: int
    variant_id: str | None = None
    price: str | None = None  # explicit unit price, e.g. "19.99"


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the user."""

    id: int
    product_id: str
    variant_id: str | None
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    attributes: dict[str, str] = field(default_factory=dict)
    available: bool = True


@dataclass(frozen=True)
class CartDTO:
    """Output: a whole cart with its aggregates."""

    owner: str
    items: list[CartLineDTO]
    subtotal: str
    item_count: int


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single order line as displayed to the user."""

    product_name: str
    sku: str
    quantity: int
    unit_price: str
    line_total: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    customer_id: str | None
    status: str
    payment_status: str
    payment_method: str | None
    shipping_method: str | None
    items: list[OrderItemDTO]
    subtotal: str
    tax_amount: str
    shipping_amount: str
    discount_amount: str
    total: str
    currency: str
    tracking_number: str | None
    created_at: str


@dataclass(frozen=True)
class CheckoutQuoteDTO:
    """Output: what an order would cost if placed now (nothing persisted)."""

    items: list[OrderItemDTO]
    subtotal: str
    tax_amount: str
    shipping_amount: str
    discount_amount: str
    total: str
    item_count: int


# --- Mapping ------------------------------------------------------------------


def cart_line_to_dto(line: CartLine, available: bool = True) -> CartLineDTO:
    return CartLineDTO(
        id=line.id,  # type: ignore[arg-type]
        product_id=line.product_id,
        variant_id=line.variant_id,
        quantity=line.quantity.value,
        unit_price=str(line.price),
        line_total=str(line.line_total),
        attributes=line.attributes.as_dict(),
        available=available,
    )


def order_item_to_dto(item: OrderItem) -> OrderItemDTO:
    return OrderItemDTO(
        product_name=item.full_product_name,
        sku=item.sku,
        quantity=item.quantity.value,
        unit_price=str(item.unit_price),
        line_total=str(item.total),
        attributes=item.attributes.as_dict(),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_id=order.customer_id,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method,
        shipping_method=order.shipping_method,
        items=[order_item_to_dto(item) for item in order.items],
        subtotal=str(order.subtotal),
        tax_amount=str(order.tax_amount),
        shipping_amount=str(order.shipping_amount),
        discount_amount=str(order.discount_amount),
        total=str(order.total),
        currency=order.currency,
        tracking_number=order.tracking_number,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
