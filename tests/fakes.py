"""In-memory fake repositories and unit of work for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in dicts. Like the JSON repositories they hand out
copies, so a change is only visible after ``save``. No file I/O.
"""

from __future__ import annotations

import copy

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.order import Order
from shopcore.domain.model.product import Product, ProductVariant
from shopcore.domain.model.value_objects import CartOwner
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.repository.variant_repository import VariantRepository


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)

    def get_by_id(self, product_id: str) -> Product | None:
        return copy.deepcopy(self._store.get(product_id))

    def get_by_sku(self, sku: str) -> Product | None:
        for p in self._store.values():
            if p.sku.lower() == sku.lower():
                return copy.deepcopy(p)
        return None

    def get_by_slug(self, slug: str) -> Product | None:
        for p in self._store.values():
            if p.slug == slug:
                return copy.deepcopy(p)
        return None

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in self._store.values()]

    def save(self, product: Product) -> None:
        self._store[product.id] = copy.deepcopy(product)


class FakeVariantRepository(VariantRepository):

    def __init__(self, variants: list[ProductVariant] | None = None) -> None:
        self._store: dict[str, ProductVariant] = {}
        for v in variants or []:
            self._store[v.id] = copy.deepcopy(v)

    def get_by_id(self, variant_id: str) -> ProductVariant | None:
        return copy.deepcopy(self._store.get(variant_id))

    def get_by_sku(self, sku: str) -> ProductVariant | None:
        for v in self._store.values():
            if v.sku.lower() == sku.lower():
                return copy.deepcopy(v)
        return None

    def list_all(self) -> list[ProductVariant]:
        return [copy.deepcopy(v) for v in self._store.values()]

    def list_for_product(self, product_id: str) -> list[ProductVariant]:
        return [copy.deepcopy(v) for v in self._store.values() if v.product_id == product_id]

    def save(self, variant: ProductVariant) -> None:
        self._store[variant.id] = copy.deepcopy(variant)


class FakeCartRepository(CartRepository):

    def __init__(self) -> None:
        self._store: dict[int, CartLine] = {}
        self._next_id = 1

    def get_by_id(self, line_id: int) -> CartLine | None:
        return copy.deepcopy(self._store.get(line_id))

    def get_by_key(
        self, owner: CartOwner, product_id: str, variant_id: str | None
    ) -> CartLine | None:
        for line in self._store.values():
            if line.key == (owner, product_id, variant_id):
                return copy.deepcopy(line)
        return None

    def list_for_owner(self, owner: CartOwner) -> list[CartLine]:
        return [copy.deepcopy(line) for line in self._store.values() if line.owner == owner]

    def save(self, line: CartLine) -> None:
        for existing in self._store.values():
            if existing.key == line.key and existing.id != line.id:
                raise ValidationError(f"Cart {line.owner} already has this line")
        if line.id is None:
            line.id = self._next_id
            self._next_id += 1
        self._store[line.id] = copy.deepcopy(line)

    def delete(self, line_id: int) -> None:
        self._store.pop(line_id, None)

    def delete_for_owner(self, owner: CartOwner) -> int:
        doomed = [i for i, line in self._store.items() if line.owner == owner]
        for line_id in doomed:
            del self._store[line_id]
        return len(doomed)


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1

    def next_id(self) -> int:
        return self._next_id

    def get_by_id(self, order_id: int) -> Order | None:
        return copy.deepcopy(self._store.get(order_id))

    def get_by_number(self, order_number: str) -> Order | None:
        for order in self._store.values():
            if order.order_number == order_number:
                return copy.deepcopy(order)
        return None

    def list_all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._store.values()]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._next_id
            self._next_id += 1
        self._store[order.id] = copy.deepcopy(order)


class FakeUnitOfWork(UnitOfWork):
    """Snapshots every repository on enter and restores it on rollback."""

    def __init__(
        self,
        products: list[Product] | None = None,
        variants: list[ProductVariant] | None = None,
    ) -> None:
        self.products = FakeProductRepository(products)
        self.variants = FakeVariantRepository(variants)
        self.carts = FakeCartRepository()
        self.orders = FakeOrderRepository()
        self.commits = 0
        self._snapshot: list[dict] | None = None
        self._committed = False

    def __enter__(self) -> FakeUnitOfWork:
        self._snapshot = [copy.deepcopy(repo.__dict__) for repo in self._repos()]
        self._committed = False
        return self

    def commit(self) -> None:
        self._committed = True
        self.commits += 1

    def rollback(self) -> None:
        if self._snapshot is not None and not self._committed:
            for repo, state in zip(self._repos(), self._snapshot):
                repo.__dict__.update(state)
        self._snapshot = None

    def _repos(self) -> list:
        return [self.products, self.variants, self.carts, self.orders]
