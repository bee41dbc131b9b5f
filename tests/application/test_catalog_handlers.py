"""Integration tests for the catalog maintenance use cases."""

import pytest

from shopcore.application.add_product import AddProductHandler, AddVariantHandler
from shopcore.application.set_stock import SetStockHandler
from shopcore.application.update_product import UpdateProductHandler
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork


def _setup() -> tuple[FakeUnitOfWork, AddProductHandler]:
    uow = FakeUnitOfWork()
    return uow, AddProductHandler(uow)


class TestAddProduct:

    def test_assigns_sequential_ids_and_slug(self):
        uow, handler = _setup()
        first = handler.handle("Classic Tee", "TEE", "20.00", quantity=5)
        second = handler.handle("Coffee Mug", "MUG", "8.00")
        assert (first.id, second.id) == ("1", "2")
        assert first.slug == "classic-tee"
        assert uow.products.get_by_sku("tee").id == "1"

    def test_duplicate_sku_rejected(self):
        _, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="SKU 'TEE' already exists"):
            handler.handle("Other Tee", "TEE", "10.00")

    def test_duplicate_slug_rejected(self):
        _, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="Slug 'classic-tee' already exists"):
            handler.handle("Classic  Tee!", "TEE2", "10.00")

    def test_name_required(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="name is required"):
            handler.handle(" ", "X", "1.00")

    def test_zero_price_rejected(self):
        uow, handler = _setup()
        with pytest.raises(ValidationError, match="greater than zero"):
            handler.handle("Free Tee", "FREE", "0")
        assert uow.products.list_all() == []

    def test_bad_weight_is_a_validation_error(self):
        uow, handler = _setup()
        with pytest.raises(ValidationError, match="Invalid weight"):
            handler.handle("Classic Tee", "TEE", "20.00", weight="abc")
        assert uow.commits == 0


class TestAddVariant:

    def test_derives_sku(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        variant = AddVariantHandler(uow).handle(
            "1", "Large Red", "24.00", quantity=2, attributes={"size": "L"}
        )
        assert variant.id == "1"
        assert variant.sku == "TEE-large-red"
        assert uow.variants.list_for_product("1")[0].attributes.as_dict() == {"size": "L"}

    def test_variant_sku_clash_with_product(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="already exists"):
            AddVariantHandler(uow).handle("1", "Large", "24.00", sku="TEE")

    def test_zero_price_rejected(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="greater than zero"):
            AddVariantHandler(uow).handle("1", "Large", "0.00")
        assert uow.variants.list_for_product("1") == []

    def test_bad_weight_is_a_validation_error(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="Invalid weight"):
            AddVariantHandler(uow).handle("1", "Large", "24.00", weight="heavy")

    def test_unknown_parent(self):
        uow, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            AddVariantHandler(uow).handle("9", "Large", "24.00")


class TestUpdateProduct:

    def test_price_and_name(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        product = UpdateProductHandler(uow).handle(
            "1", new_price="25.00", new_name="Vintage Tee"
        )
        assert product.price == Money.of("25.00")
        assert uow.products.get_by_slug("vintage-tee").id == "1"

    def test_rename_onto_existing_slug(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        handler.handle("Vintage Tee", "VTEE", "20.00")
        with pytest.raises(ValidationError, match="Slug 'vintage-tee'"):
            UpdateProductHandler(uow).handle("1", new_name="Vintage Tee")
        assert uow.products.get_by_id("1").name == "Classic Tee"

    def test_deactivate(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        UpdateProductHandler(uow).handle("1", deactivate=True)
        assert not uow.products.get_by_id("1").is_active


class TestSetStock:

    def test_product_and_variant_stock(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        AddVariantHandler(uow).handle("1", "Large", "24.00")

        stock = SetStockHandler(uow)
        stock.handle("1", 7)
        stock.handle("1", 4, variant_id="1")

        assert uow.products.get_by_id("1").quantity == 7
        assert uow.variants.get_by_id("1").quantity == 4

    def test_negative_rejected(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        with pytest.raises(ValidationError, match="cannot be negative"):
            SetStockHandler(uow).handle("1", -1)

    def test_variant_of_other_product(self):
        uow, handler = _setup()
        handler.handle("Classic Tee", "TEE", "20.00")
        handler.handle("Mug", "MUG", "8.00")
        AddVariantHandler(uow).handle("1", "Large", "24.00")
        with pytest.raises(EntityNotFoundError):
            SetStockHandler(uow).handle("2", 3, variant_id="1")
