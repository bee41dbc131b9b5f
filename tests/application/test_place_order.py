"""Integration tests for checkout (PlaceOrder and QuoteCheckout).

Uses the in-memory FakeUnitOfWork, no file I/O.
"""

from decimal import Decimal

import pytest

from shopcore.application.add_cart_item import AddCartItemHandler
from shopcore.application.dto import OrderItemSpec
from shopcore.application.place_order import PlaceOrderHandler
from shopcore.application.quote_checkout import QuoteCheckoutHandler
from shopcore.domain.exceptions import InsufficientStockError, ValidationError
from shopcore.domain.model.product import Product, ProductVariant
from shopcore.domain.model.value_objects import Attributes, CartOwner, Money
from tests.fakes import FakeUnitOfWork

ALICE = CartOwner.user("42")
GUEST = CartOwner.session("sess-1")


def _setup() -> tuple[FakeUnitOfWork, PlaceOrderHandler]:
    """Build a handler over a small catalog."""
    uow = FakeUnitOfWork(
        products=[
            Product(id="1", name="Tee", sku="TEE", price=Money.of("20.00"), quantity=10),
            Product(id="2", name="Mug", sku="MUG", price=Money.of("8.00"), quantity=1),
            Product(id="3", name="Poster", sku="POS", price=Money.of("5.00"), quantity=4),
        ],
        variants=[
            ProductVariant(
                id="10", product_id="1", name="Large", sku="TEE-large",
                price=Money.of("24.00"), quantity=3,
                attributes=Attributes.of({"size": "L"}),
            ),
        ],
    )
    return uow, PlaceOrderHandler(uow)


def _add(uow: FakeUnitOfWork, owner: CartOwner, product_id: str, qty: int, variant_id=None):
    return AddCartItemHandler(uow).handle(owner, product_id, qty, variant_id=variant_id)


def _sell_out(uow: FakeUnitOfWork, product_id: str) -> None:
    product = uow.products.get_by_id(product_id)
    product.set_stock(0)
    uow.products.save(product)


class TestPlaceOrderHappyPath:

    def test_order_from_cart(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 3)

        dto = handler.handle(
            ALICE,
            payment_method="card",
            tax_amount="4.80",
            shipping_amount="5.99",
            discount_amount="10.00",
        )

        assert dto.id == 1
        assert dto.status == "pending"
        assert dto.payment_status == "pending"
        assert dto.customer_id == "42"
        assert dto.subtotal == "$60.00"
        assert dto.total == "$60.79"
        assert dto.order_number.startswith("ORD-")

    def test_cart_is_cleared(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        _add(uow, ALICE, "3", 2)
        handler.handle(ALICE, payment_method="card")
        assert uow.carts.list_for_owner(ALICE) == []

    def test_other_carts_untouched(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        _add(uow, GUEST, "1", 1)
        handler.handle(ALICE, payment_method="card")
        assert len(uow.carts.list_for_owner(GUEST)) == 1

    def test_guest_order_has_no_customer(self):
        uow, handler = _setup()
        _add(uow, GUEST, "3", 1)
        dto = handler.handle(GUEST, payment_method="paypal")
        assert dto.customer_id is None

    def test_variant_snapshot(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 2, variant_id="10")
        dto = handler.handle(ALICE, payment_method="card")
        [item] = dto.items
        assert item.product_name == "Tee - Large"
        assert item.sku == "TEE-large"
        assert item.unit_price == "$24.00"
        assert item.attributes == {"size": "L"}

    def test_discount_larger_than_order(self):
        uow, handler = _setup()
        _add(uow, ALICE, "3", 2)
        dto = handler.handle(ALICE, payment_method="card", discount_amount="50")
        assert dto.subtotal == "$10.00"
        assert dto.total == "$0.00"

    def test_direct_items_bypass_cart(self):
        uow, handler = _setup()
        _add(uow, ALICE, "3", 1)
        dto = handler.handle(
            ALICE,
            payment_method="card",
            items=[OrderItemSpec("1", 2), OrderItemSpec("1", 1, variant_id="10", price="19.00")],
        )
        assert [i.unit_price for i in dto.items] == ["$20.00", "$19.00"]
        assert dto.subtotal == "$59.00"
        assert len(uow.carts.list_for_owner(ALICE)) == 1

    def test_explicit_order_number(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        dto = handler.handle(ALICE, payment_method="card", order_number="ORD-CUSTOM-1")
        assert uow.orders.get_by_number("ORD-CUSTOM-1").id == dto.id


class TestSnapshotImmutability:

    def test_cart_price_is_honoured_at_checkout(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)

        tee = uow.products.get_by_id("1")
        tee.update_price(Money.of("35.00"))
        uow.products.save(tee)

        dto = handler.handle(ALICE, payment_method="card")
        assert dto.items[0].unit_price == "$20.00"

    def test_order_unchanged_by_later_catalog_edits(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        dto = handler.handle(ALICE, payment_method="card")

        tee = uow.products.get_by_id("1")
        tee.update_price(Money.of("99.00"))
        tee.rename("Renamed Tee")
        uow.products.save(tee)

        saved = uow.orders.get_by_id(dto.id)
        assert saved.items[0].product_name == "Tee"
        assert saved.items[0].unit_price == Money.of("20.00")
        assert saved.total == Money.of("20.00")


class TestCentsRounding:

    def test_subtotal_is_sum_of_rounded_lines(self):
        uow = _setup()[0]
        AddCartItemHandler(uow).handle(ALICE, "1", 1, price="0.335")
        AddCartItemHandler(uow).handle(ALICE, "3", 1, price="0.335")

        dto = PlaceOrderHandler(uow).handle(ALICE, payment_method="card", tax_amount="0.005")

        assert [i.unit_price for i in dto.items] == ["$0.34", "$0.34"]
        assert [i.line_total for i in dto.items] == ["$0.34", "$0.34"]
        assert dto.subtotal == "$0.68"
        assert dto.total == "$0.69"

        saved = uow.orders.get_by_id(dto.id)
        assert saved.subtotal == sum((i.total for i in saved.items), Money.zero())
        assert saved.total.amount == Decimal("0.69")
        assert saved.total.amount.as_tuple().exponent == -2

    def test_direct_item_price_rounded(self):
        uow, handler = _setup()
        dto = handler.handle(
            GUEST, payment_method="card", items=[OrderItemSpec("3", 3, price="1.005")]
        )
        assert dto.items[0].unit_price == "$1.01"
        assert dto.subtotal == "$3.03"


class TestPlaceOrderAtomicity:

    def test_one_unavailable_line_places_nothing(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        _add(uow, ALICE, "2", 1)
        _add(uow, ALICE, "3", 1)
        _sell_out(uow, "2")

        with pytest.raises(InsufficientStockError) as excinfo:
            handler.handle(ALICE, payment_method="card")

        assert excinfo.value.product_id == "2"
        assert uow.orders.list_all() == []
        assert len(uow.carts.list_for_owner(ALICE)) == 3

    def test_deactivated_product_blocks_checkout(self):
        uow, handler = _setup()
        _add(uow, ALICE, "3", 1)
        poster = uow.products.get_by_id("3")
        poster.deactivate()
        uow.products.save(poster)

        with pytest.raises(InsufficientStockError):
            handler.handle(ALICE, payment_method="card")
        assert uow.orders.list_all() == []

    def test_empty_cart_rejected(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="empty"):
            handler.handle(ALICE, payment_method="card")

    def test_payment_method_required(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        with pytest.raises(ValidationError, match="Payment method is required"):
            handler.handle(ALICE, payment_method="  ")

    def test_duplicate_order_number_rejected(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 1)
        handler.handle(ALICE, payment_method="card", order_number="ORD-X")
        _add(uow, ALICE, "1", 1)

        with pytest.raises(ValidationError, match="already exists"):
            handler.handle(ALICE, payment_method="card", order_number="ORD-X")
        assert len(uow.orders.list_all()) == 1
        assert len(uow.carts.list_for_owner(ALICE)) == 1

    def test_stock_is_not_decremented(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 4)
        handler.handle(ALICE, payment_method="card")
        assert uow.products.get_by_id("1").quantity == 10


class TestQuoteCheckout:

    def test_quote_matches_order(self):
        uow, handler = _setup()
        _add(uow, ALICE, "1", 3)

        quote = QuoteCheckoutHandler(uow).handle(
            ALICE, tax_amount="4.80", shipping_amount="5.99", discount_amount="10.00"
        )
        assert quote.subtotal == "$60.00"
        assert quote.total == "$60.79"
        assert quote.item_count == 3

        dto = handler.handle(
            ALICE,
            payment_method="card",
            tax_amount="4.80",
            shipping_amount="5.99",
            discount_amount="10.00",
        )
        assert dto.total == quote.total

    def test_quote_persists_nothing(self):
        uow, _ = _setup()
        _add(uow, ALICE, "1", 1)
        commits = uow.commits
        QuoteCheckoutHandler(uow).handle(ALICE)
        assert uow.commits == commits
        assert uow.orders.list_all() == []
        assert len(uow.carts.list_for_owner(ALICE)) == 1

    def test_quote_reports_unavailable_stock(self):
        uow, _ = _setup()
        _add(uow, ALICE, "2", 1)
        _sell_out(uow, "2")
        with pytest.raises(InsufficientStockError):
            QuoteCheckoutHandler(uow).handle(ALICE)
