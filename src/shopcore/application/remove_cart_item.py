"""Application service: Remove Cart Item and Clear Cart use cases."""

from __future__ import annotations

import structlog

from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.value_objects import CartOwner
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class RemoveCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(self, line_id: int, owner: CartOwner | None = None) -> None:
        with self._uow as uow:
            line = uow.carts.get_by_id(line_id)
            if line is None or (owner is not None and line.owner != owner):
                raise EntityNotFoundError(f"Cart line #{line_id} not found")
            uow.carts.delete(line_id)
            uow.commit()

        logger.info("cart_item_removed", line_id=line_id)


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(self, owner: CartOwner) -> int:
        """Empty the owner's cart. Returns the number of lines removed."""
        with self._uow as uow:
            removed = uow.carts.delete_for_owner(owner)
            uow.commit()

        logger.info("cart_cleared", owner=str(owner), removed=removed)
        return removed
