"""Application service: Place Order use case (checkout).

This is the one place where mutable cart state becomes immutable order
state. Everything happens inside a single unit of work: stock
re-validation, snapshotting, aggregate validation, writing the order
with its items and clearing the consumed cart lines. Any failure leaves
the store exactly as it was.
"""

from __future__ import annotations

import structlog

from shopcore.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import TransactionFailureError, ValidationError
from shopcore.domain.model.order import Order, generate_order_number
from shopcore.domain.model.value_objects import CartOwner, Money, OwnerKind, Quantity
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.catalog_resolver import CatalogResolver
from shopcore.domain.service.order_assembler import CheckoutLine, OrderAssembler
from shopcore.domain.service.order_totals import OrderTotalsValidator

logger = structlog.get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 10


def checkout_lines_from_specs(
    specs: list[OrderItemSpec], currency: str = "USD"
) -> list[CheckoutLine]:
    return [
        CheckoutLine(
            product_id=spec.product_id,
            variant_id=spec.variant_id,
            quantity=Quantity(spec.quantity),
            price=Money.of(spec.price, currency) if spec.price is not None else None,
        )
        for spec in specs
    ]


class PlaceOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._validator = OrderTotalsValidator()

    @retry_on_transaction_failure()
    def handle(
        self,
        owner: CartOwner,
        *,
        payment_method: str,
        shipping_method: str | None = None,
        tax_amount: str = "0",
        shipping_amount: str = "0",
        discount_amount: str = "0",
        items: list[OrderItemSpec] | None = None,
        order_number: str | None = None,
        notes: str | None = None,
        currency: str = "USD",
    ) -> OrderDTO:
        """Place an order from the owner's cart, or from ``items`` if given.

        Steps:
        1. Collect checkout lines (cart lines keep their add-time price).
        2. Re-validate stock for every line; one failure aborts everything.
        3. Snapshot lines into OrderItems and build the Order aggregate.
        4. Validate the aggregates, persist, clear the consumed cart lines.
        """
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")

        tax = Money.of(tax_amount, currency)
        shipping = Money.of(shipping_amount, currency)
        discount = Money.of(discount_amount, currency)

        with self._uow as uow:
            cart_lines = []
            if items is not None:
                lines = checkout_lines_from_specs(items, currency)
            else:
                cart_lines = uow.carts.list_for_owner(owner)
                if not cart_lines:
                    raise ValidationError(f"Cart for {owner} is empty")
                lines = [CheckoutLine.from_cart_line(line) for line in cart_lines]

            assembler = OrderAssembler(CatalogResolver(uow.products, uow.variants))
            order_items = assembler.assemble(lines)

            order = Order.create(
                order_number=self._claim_order_number(uow, order_number),
                customer_id=owner.id if owner.kind is OwnerKind.USER else None,
                items=order_items,
                tax_amount=tax,
                shipping_amount=shipping,
                discount_amount=discount,
                payment_method=payment_method.strip(),
                shipping_method=shipping_method,
                notes=notes,
                currency=currency,
            )
            self._validator.validate(order)
            uow.orders.save(order)

            for line in cart_lines:
                uow.carts.delete(line.id)  # type: ignore[arg-type]

            uow.commit()

        logger.info(
            "order_placed",
            order_id=order.id,
            order_number=order.order_number,
            owner=str(owner),
            lines=len(order.items),
            total=str(order.total),
        )
        return order_to_dto(order)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _claim_order_number(uow: UnitOfWork, requested: str | None) -> str:
        if requested:
            if uow.orders.get_by_number(requested) is not None:
                raise ValidationError(f"Order number '{requested}' already exists")
            return requested

        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            if uow.orders.get_by_number(candidate) is None:
                return candidate
        raise TransactionFailureError("Could not allocate a unique order number")
