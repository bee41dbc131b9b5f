"""Abstract unit of work: one transaction over all repositories.

Usage::

    with uow:
        line = uow.carts.get_by_id(7)
        ...
        uow.commit()

Leaving the block without ``commit()`` (or through an exception)
discards every change made inside it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.repository.variant_repository import VariantRepository


class UnitOfWork(ABC):

    products: ProductRepository
    variants: VariantRepository
    carts: CartRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since ``__enter__`` durable, atomically."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes (a no-op after ``commit``)."""
