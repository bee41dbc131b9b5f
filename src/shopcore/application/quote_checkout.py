"""Application service: Quote Checkout use case (query).

Prices a prospective order exactly as PlaceOrderHandler would, without
writing anything. Useful for showing totals before the customer pays.
"""

from __future__ import annotations

from shopcore.application.dto import CheckoutQuoteDTO, OrderItemSpec, order_item_to_dto
from shopcore.application.place_order import checkout_lines_from_specs
from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.value_objects import CartOwner, Money
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.catalog_resolver import CatalogResolver
from shopcore.domain.service.order_assembler import CheckoutLine, OrderAssembler
from shopcore.domain.service.order_totals import compute_subtotal, compute_total


class QuoteCheckoutHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        owner: CartOwner,
        *,
        tax_amount: str = "0",
        shipping_amount: str = "0",
        discount_amount: str = "0",
        items: list[OrderItemSpec] | None = None,
        currency: str = "USD",
    ) -> CheckoutQuoteDTO:
        tax = Money.of(tax_amount, currency)
        shipping = Money.of(shipping_amount, currency)
        discount = Money.of(discount_amount, currency)

        with self._uow as uow:
            if items is not None:
                lines = checkout_lines_from_specs(items, currency)
            else:
                cart_lines = uow.carts.list_for_owner(owner)
                if not cart_lines:
                    raise ValidationError(f"Cart for {owner} is empty")
                lines = [CheckoutLine.from_cart_line(line) for line in cart_lines]

            order_items = OrderAssembler(
                CatalogResolver(uow.products, uow.variants)
            ).assemble(lines)

        subtotal = compute_subtotal((item.total for item in order_items), currency)
        total = compute_total(subtotal, tax, shipping, discount)
        return CheckoutQuoteDTO(
            items=[order_item_to_dto(item) for item in order_items],
            subtotal=str(subtotal),
            tax_amount=str(tax),
            shipping_amount=str(shipping),
            discount_amount=str(discount),
            total=str(total),
            item_count=sum(item.quantity.value for item in order_items),
        )
