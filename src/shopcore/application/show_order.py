"""Application service: Show Order use case (query)."""

from __future__ import annotations

from shopcore.application.dto import OrderDTO, order_to_dto
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int | None = None, order_number: str | None = None) -> OrderDTO:
        """Look an order up by id or by order number."""
        with self._uow as uow:
            if order_id is not None:
                order = uow.orders.get_by_id(order_id)
                label = f"#{order_id}"
            elif order_number:
                order = uow.orders.get_by_number(order_number)
                label = order_number
            else:
                raise EntityNotFoundError("No order id or number given")

        if order is None:
            raise EntityNotFoundError(f"Order {label} not found")
        return order_to_dto(order)
