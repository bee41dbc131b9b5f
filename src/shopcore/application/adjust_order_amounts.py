"""Application service: Adjust Order Amounts use case.

An admin may correct tax, shipping or discount after the order exists
(e.g. a shipping refund). The subtotal and items stay frozen; the total
is re-derived and the whole aggregate re-validated before saving.
"""

from __future__ import annotations

import structlog

from shopcore.application.dto import OrderDTO, order_to_dto
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.value_objects import Money
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.order_totals import OrderTotalsValidator

logger = structlog.get_logger(__name__)


class AdjustOrderAmountsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._validator = OrderTotalsValidator()

    @retry_on_transaction_failure()
    def handle(
        self,
        order_id: int,
        tax_amount: str | None = None,
        shipping_amount: str | None = None,
        discount_amount: str | None = None,
    ) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous_total = order.total
            order.adjust_amounts(
                tax_amount=self._money(tax_amount, order.currency),
                shipping_amount=self._money(shipping_amount, order.currency),
                discount_amount=self._money(discount_amount, order.currency),
            )
            self._validator.validate(order)
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "order_amounts_adjusted",
            order_id=order_id,
            previous_total=str(previous_total),
            total=str(order.total),
        )
        return order_to_dto(order)

    @staticmethod
    def _money(raw: str | None, currency: str) -> Money | None:
        return Money.of(raw, currency) if raw is not None else None
