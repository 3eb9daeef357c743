"""Integration tests for the AddProduct use case."""

import pytest

from ims.application.add_product import AddProductHandler
from ims.domain.exceptions import ConflictError, ValidationError
from tests.fakes import seeded_database, uow_factory


class TestAddProduct:

    def test_creates_product_and_inventory(self):
        db = seeded_database()
        dto = AddProductHandler(uow_factory(db)).handle("Widget", 10)

        assert dto.name == "Widget"
        assert db.products[dto.product_id].name == "Widget"
        inv = db.inventory[dto.product_id]
        assert (inv.total_stock, inv.available_stock, inv.version) == (10, 10, 0)

    def test_duplicate_name_rejected(self):
        db = seeded_database(("p1", "Widget", 5))
        with pytest.raises(ConflictError, match="already exists"):
            AddProductHandler(uow_factory(db)).handle("widget", 10)
        assert len(db.products) == 1

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="Name is required"):
            AddProductHandler(uow_factory(seeded_database())).handle("  ", 10)

    @pytest.mark.parametrize("stock", [0, -3])
    def test_non_positive_stock_rejected(self, stock):
        db = seeded_database()
        with pytest.raises(ValidationError, match="Stock must be positive"):
            AddProductHandler(uow_factory(db)).handle("Widget", stock)
        assert db.products == {}
        assert db.inventory == {}
