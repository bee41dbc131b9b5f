"""Order aggregate: the immutable result of a checkout.

The Order is an aggregate root that owns its OrderItems. Items and the
snapshotted subtotal never change after creation; only the status
fields, the tracking fields and the three monetary adjustments (tax,
shipping, discount) may be edited, and every adjustment re-derives the
total.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.value_objects import Attributes, Money, Quantity
from shopcore.domain.service.order_totals import compute_subtotal, compute_total


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED)


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_STATUS_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
}

_PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
}


def generate_order_number(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Order number in the ``ORD-YYYYMMDD-NNNNNN`` format.

    Uniqueness is the caller's job (check the repository and retry).
    """
    now = now or datetime.now(timezone.utc)
    digits = (rng or random).randrange(1_000_000)
    return f"ORD-{now:%Y%m%d}-{digits:06d}"


@dataclass(frozen=True)
class OrderItem:
    """Permanent snapshot of one purchased line.

    Names, SKU, price and weight are copied from the catalog at order
    time and are never re-derived afterwards, so order history stays
    readable after the product is renamed, re-priced or deleted.
    """

    product_id: str
    product_name: str
    sku: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    total: Money
    variant_id: str | None = None
    variant_name: str | None = None
    weight: Decimal | None = None
    attributes: Attributes = field(default_factory=Attributes)

    @staticmethod
    def snapshot(
        product_id: str,
        product_name: str,
        sku: str,
        quantity: Quantity,
        unit_price: Money,
        variant_id: str | None = None,
        variant_name: str | None = None,
        weight: Decimal | None = None,
        attributes: Attributes | None = None,
    ) -> OrderItem:
        return OrderItem(
            product_id=product_id,
            product_name=product_name,
            sku=sku,
            quantity=quantity,
            unit_price=unit_price,
            total=(unit_price * quantity.value).quantized(),
            variant_id=variant_id,
            variant_name=variant_name,
            weight=weight,
            attributes=attributes or Attributes(),
        )

    @property
    def full_product_name(self) -> str:
        if self.variant_name:
            return f"{self.product_name} - {self.variant_name}"
        return self.product_name


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders; it computes the
    aggregates from the items. The ``__init__`` is intentionally simple
    so the repository can reconstitute persisted orders without
    recomputing anything (the validator checks them instead).
    """

    id: int | None
    order_number: str
    customer_id: str | None
    items: tuple[OrderItem, ...]
    subtotal: Money
    tax_amount: Money
    shipping_amount: Money
    discount_amount: Money
    total: Money
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    shipping_method: str | None = None
    notes: str | None = None
    tracking_number: str | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer_id: str | None,
        items: list[OrderItem],
        *,
        tax_amount: Money,
        shipping_amount: Money,
        discount_amount: Money,
        payment_method: str | None = None,
        shipping_method: str | None = None,
        notes: str | None = None,
        currency: str = "USD",
    ) -> Order:
        """Create a new order, deriving subtotal and total from the items."""
        if not order_number or not order_number.strip():
            raise ValidationError("Order number is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        subtotal = compute_subtotal((item.total for item in items), currency)
        total = compute_total(subtotal, tax_amount, shipping_amount, discount_amount)

        return Order(
            id=None,
            order_number=order_number.strip(),
            customer_id=customer_id,
            items=tuple(items),
            subtotal=subtotal,
            tax_amount=tax_amount,
            shipping_amount=shipping_amount,
            discount_amount=discount_amount,
            total=total,
            currency=currency,
            payment_method=payment_method,
            shipping_method=shipping_method,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(
        self,
        new_status: OrderStatus,
        tracking_number: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Move along pending -> processing -> shipped -> delivered.

        ``cancelled`` and ``refunded`` are reachable from any non-terminal
        state. Terminal orders accept no further transitions.
        """
        if new_status == self.status:
            raise ValidationError(f"Order is already {self.status.value}")
        allowed = _STATUS_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot move order from {self.status.value} to {new_status.value}"
            )

        now = now or datetime.now(timezone.utc)
        if new_status == OrderStatus.SHIPPED:
            self.shipped_at = now
            if tracking_number:
                self.tracking_number = tracking_number
        elif new_status == OrderStatus.DELIVERED:
            self.delivered_at = now
        self.status = new_status

    def update_payment_status(self, new_status: PaymentStatus) -> None:
        if new_status == self.payment_status:
            raise ValidationError(f"Payment is already {self.payment_status.value}")
        allowed = _PAYMENT_TRANSITIONS.get(self.payment_status, set())
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot move payment from {self.payment_status.value} "
                f"to {new_status.value}"
            )
        self.payment_status = new_status

    # --- Monetary adjustments -------------------------------------------------

    def adjust_amounts(
        self,
        tax_amount: Money | None = None,
        shipping_amount: Money | None = None,
        discount_amount: Money | None = None,
    ) -> None:
        """Edit any of the three adjustment fields and re-derive the total."""
        if tax_amount is None and shipping_amount is None and discount_amount is None:
            raise ValidationError("Nothing to adjust")
        if tax_amount is not None:
            self.tax_amount = tax_amount
        if shipping_amount is not None:
            self.shipping_amount = shipping_amount
        if discount_amount is not None:
            self.discount_amount = discount_amount
        self.recalculate_total()

    def recalculate_total(self) -> Money:
        self.total = compute_total(
            self.subtotal, self.tax_amount, self.shipping_amount, self.discount_amount
        )
        return self.total

    # --- Computed properties --------------------------------------------------

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.DELIVERED

    @property
    def status_display(self) -> str:
        return self.status.value.capitalize()

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
