"""Application service: Update Order Status and Payment Status use cases.

Status changes are admin-driven; the Order aggregate decides which
transitions are legal. Items and totals are never touched here.
"""

from __future__ import annotations

import structlog

from shopcore.application.dto import OrderDTO, order_to_dto
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.order import OrderStatus, PaymentStatus
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


def _parse_enum(enum_cls, raw: str, label: str):
    try:
        return enum_cls(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{raw}' (expected one of: {choices})") from exc


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(
        self,
        order_id: int,
        status: str,
        tracking_number: str | None = None,
    ) -> OrderDTO:
        new_status = _parse_enum(OrderStatus, status, "order status")

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            order.transition_to(new_status, tracking_number=tracking_number)
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "order_status_changed",
            order_id=order_id,
            previous=previous.value,
            status=new_status.value,
        )
        return order_to_dto(order)


class UpdatePaymentStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(self, order_id: int, payment_status: str) -> OrderDTO:
        new_status = _parse_enum(PaymentStatus, payment_status, "payment status")

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            order.update_payment_status(new_status)
            uow.orders.save(order)
            uow.commit()

        logger.info("payment_status_changed", order_id=order_id, status=new_status.value)
        return order_to_dto(order)
