"""Unit tests for the Order Assembler domain service."""

import pytest

from shopcore.domain.exceptions import InsufficientStockError, ValidationError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.product import Product, ProductVariant
from shopcore.domain.model.value_objects import Attributes, CartOwner, Money, Quantity
from shopcore.domain.service.catalog_resolver import CatalogResolver
from shopcore.domain.service.order_assembler import CheckoutLine, OrderAssembler
from tests.fakes import FakeProductRepository, FakeVariantRepository


def _setup() -> tuple[OrderAssembler, FakeProductRepository]:
    products = [
        Product(id="1", name="Tee", sku="TEE", price=Money.of("20.00"), quantity=5),
        Product(id="2", name="Mug", sku="MUG", price=Money.of("8.00"), quantity=0),
    ]
    variants = [
        ProductVariant(
            id="10", product_id="1", name="Large", sku="TEE-large",
            price=Money.of("24.00"), quantity=2,
            attributes=Attributes.of({"size": "L"}),
        ),
    ]
    product_repo = FakeProductRepository(products)
    resolver = CatalogResolver(product_repo, FakeVariantRepository(variants))
    return OrderAssembler(resolver), product_repo


def _line(product_id: str, qty: int, variant_id: str | None = None, price: str | None = None):
    return CheckoutLine(
        product_id=product_id,
        variant_id=variant_id,
        quantity=Quantity(qty),
        price=Money.of(price) if price else None,
    )


class TestAssemble:

    def test_live_price_when_line_has_none(self):
        assembler, _ = _setup()
        [item] = assembler.assemble([_line("1", 3)])
        assert item.unit_price == Money.of("20.00")
        assert item.total == Money.of("60.00")
        assert item.product_name == "Tee"
        assert item.sku == "TEE"

    def test_line_price_wins_over_catalog(self):
        assembler, _ = _setup()
        [item] = assembler.assemble([_line("1", 1, price="15.00")])
        assert item.unit_price == Money.of("15.00")

    def test_variant_snapshot(self):
        assembler, _ = _setup()
        [item] = assembler.assemble([_line("1", 2, variant_id="10")])
        assert item.variant_name == "Large"
        assert item.sku == "TEE-large"
        assert item.unit_price == Money.of("24.00")
        assert item.attributes.as_dict() == {"size": "L"}

    def test_cart_line_keeps_its_snapshot(self):
        assembler, product_repo = _setup()
        cart_line = CartLine(
            id=7,
            owner=CartOwner.user("42"),
            product_id="1",
            variant_id=None,
            quantity=Quantity(2),
            price=Money.of("18.00"),
        )
        tee = product_repo.get_by_id("1")
        tee.update_price(Money.of("99.00"))
        product_repo.save(tee)

        [item] = assembler.assemble([CheckoutLine.from_cart_line(cart_line)])
        assert item.unit_price == Money.of("18.00")

    def test_nothing_to_order(self):
        assembler, _ = _setup()
        with pytest.raises(ValidationError, match="Nothing to order"):
            assembler.assemble([])


class TestAvailability:

    def test_one_unavailable_line_fails_everything(self):
        assembler, _ = _setup()
        with pytest.raises(InsufficientStockError) as excinfo:
            assembler.assemble([_line("1", 1), _line("2", 1), _line("1", 1, variant_id="10")])
        assert excinfo.value.product_id == "2"
        assert excinfo.value.requested == 1

    def test_error_names_cart_line(self):
        assembler, _ = _setup()
        line = CheckoutLine(
            product_id="1", variant_id="10", quantity=Quantity(3), line_id=5
        )
        with pytest.raises(InsufficientStockError, match="cart line #5") as excinfo:
            assembler.assemble([line])
        assert excinfo.value.line_id == 5
        assert excinfo.value.variant_id == "10"

    def test_deactivated_product_is_unavailable(self):
        assembler, product_repo = _setup()
        tee = product_repo.get_by_id("1")
        tee.deactivate()
        product_repo.save(tee)
        with pytest.raises(InsufficientStockError):
            assembler.assemble([_line("1", 1)])

    def test_unknown_variant_is_unavailable(self):
        assembler, _ = _setup()
        with pytest.raises(InsufficientStockError):
            assembler.assemble([_line("1", 1, variant_id="404")])
