"""Domain service: Order aggregate arithmetic and validation.

The two aggregate rules of an order live here so that the Order
aggregate, the checkout quote and the validator all share one
definition:

    subtotal = sum(item.total for item in items)
    total    = max(0, subtotal + tax + shipping - discount)
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from shopcore.domain.exceptions import InconsistentTotalsError, ValidationError
from shopcore.domain.model.value_objects import Money

if TYPE_CHECKING:
    from shopcore.domain.model.order import Order, OrderItem


def compute_subtotal(line_totals: Iterable[Money], currency: str = "USD") -> Money:
    result = Money.zero(currency)
    for line_total in line_totals:
        result = result + line_total
    return result.quantized()


def compute_total(
    subtotal: Money,
    tax_amount: Money,
    shipping_amount: Money,
    discount_amount: Money,
) -> Money:
    """Grand total, clamped at zero when the discount exceeds everything else."""
    gross = subtotal + tax_amount + shipping_amount
    if discount_amount.currency != gross.currency:
        raise ValidationError(
            f"Cannot combine {gross.currency} with {discount_amount.currency}"
        )
    # Money cannot go negative, so clamp on the raw Decimal
    net = gross.amount - discount_amount.amount
    return Money(max(Decimal("0"), net), gross.currency).quantized()


class OrderTotalsValidator:
    """Checks that an order's stored aggregates are mutually consistent.

    A mismatch can only come from corrupted data or a caller that
    bypassed the assembler, so it is reported loudly rather than fixed.
    """

    def validate(self, order: Order) -> None:
        for item in order.items:
            self.validate_item(item)

        expected_subtotal = compute_subtotal(
            (item.total for item in order.items), order.currency
        )
        if order.subtotal != expected_subtotal:
            raise InconsistentTotalsError(
                f"Order {order.order_number}: subtotal {order.subtotal} "
                f"does not match sum of items {expected_subtotal}"
            )

        expected_total = compute_total(
            order.subtotal,
            order.tax_amount,
            order.shipping_amount,
            order.discount_amount,
        )
        if order.total != expected_total:
            raise InconsistentTotalsError(
                f"Order {order.order_number}: total {order.total} "
                f"does not match computed total {expected_total}"
            )

    @staticmethod
    def validate_item(item: OrderItem) -> None:
        expected = item.unit_price * item.quantity.value
        if item.total != expected:
            raise InconsistentTotalsError(
                f"Line {item.sku}: total {item.total} does not equal "
                f"{item.unit_price} x {item.quantity}"
            )
