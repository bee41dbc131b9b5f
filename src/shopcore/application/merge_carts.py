"""Application service: Merge Carts use case (guest -> user on login).

Session-keyed lines are moved to the user's cart. Where the user
already has a line for the same (product, variant), the guest quantity
is added to it, exactly as a second add-to-cart would, and the user's
price snapshot is kept.
"""

from __future__ import annotations

import structlog

from shopcore.application.dto import CartDTO
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.application.show_cart import ShowCartHandler
from shopcore.domain.model.value_objects import CartOwner
from shopcore.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class MergeCartsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @retry_on_transaction_failure()
    def handle(self, session_id: str, user_id: str) -> CartDTO:
        guest = CartOwner.session(session_id)
        user = CartOwner.user(user_id)

        merged = moved = 0
        with self._uow as uow:
            for guest_line in uow.carts.list_for_owner(guest):
                existing = uow.carts.get_by_key(
                    user, guest_line.product_id, guest_line.variant_id
                )
                if existing is not None:
                    existing.increase(guest_line.quantity)
                    uow.carts.save(existing)
                    uow.carts.delete(guest_line.id)  # type: ignore[arg-type]
                    merged += 1
                else:
                    guest_line.reassign(user)
                    uow.carts.save(guest_line)
                    moved += 1
            uow.commit()

        logger.info(
            "carts_merged",
            session_id=session_id,
            user_id=user_id,
            moved=moved,
            merged=merged,
        )
        return ShowCartHandler(self._uow).handle(user)
