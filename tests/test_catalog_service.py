from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from packages.db import create_all, session_scope
from services.catalog import CatalogService, RecordConflict, RecordNotFound, code_number, validate_domain


def _product_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Basmati Rice",
        "category": "Grains",
        "supplier": "Sample Grocery Supplier",
        "price": 2.5,
        "quantity": 40,
        "purchase_date": "2024-03-01",
    }
    payload.update(overrides)
    return payload


def _db(tmp_path: Path) -> Path:
    db_path = tmp_path / "catalog.db"
    create_all(db_path)
    return db_path


def test_validate_domain_and_code_number() -> None:
    assert validate_domain(" Grocery ") == "grocery"
    with pytest.raises(RecordNotFound):
        validate_domain("pharmacy")
    assert code_number("MD0042") == 42
    assert code_number("STF007") == 7
    assert code_number("custom") == 0


def test_categories_are_unique_per_domain(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        catalog.create_category("grocery", {"name": "Fruits", "description": "Fresh fruit"})
        catalog.create_category("medicine", {"name": "Fruits"})
        with pytest.raises(RecordConflict):
            catalog.create_category("grocery", {"name": " fruits "})

    with session_scope(db_path) as session:
        names = [category.name for category in CatalogService(session).list_categories("grocery")]
    assert names == ["Fruits"]


def test_category_update_and_delete(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        category = catalog.create_category("general", {"name": "Stationery"})
        updated = catalog.update_category("general", category.id, {"status": "INACTIVE"})
        assert updated.status == "inactive"
        with pytest.raises(ValueError):
            catalog.update_category("general", category.id, {"status": "archived"})
        with pytest.raises(RecordNotFound):
            catalog.delete_category("grocery", category.id)
        catalog.delete_category("general", category.id)
        assert catalog.list_categories("general") == []


def test_supplier_requires_contact_fields(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        with pytest.raises(ValueError, match="Contact person is required"):
            catalog.create_supplier("medicine", {"name": "PharmaCorp Ltd", "email": "a@b.c", "phone": "1"})
        with pytest.raises(ValueError, match="Email"):
            catalog.create_supplier(
                "medicine",
                {"name": "PharmaCorp Ltd", "contact_person": "Sam", "email": "nope", "phone": "1"},
            )
        supplier = catalog.create_supplier(
            "medicine",
            {"name": "PharmaCorp Ltd", "contact_person": "Sam", "email": "Orders@Pharma.Example", "phone": "555"},
        )
        assert supplier.email == "orders@pharma.example"


def test_create_product_assigns_codes_and_aggregates(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        first = catalog.create_product("grocery", _product_payload())
        second = catalog.create_product("grocery", _product_payload(name="Lentils", quantity=3))
        medicine = catalog.create_product(
            "medicine",
            _product_payload(name="Paracetamol", expiry_date="2025-03-01", batch_number="B-1"),
        )

        assert (first.code, second.code, medicine.code) == ("GR0001", "GR0002", "MD0001")
        assert first.current_stock == 40
        assert first.balance_stock == 40
        assert first.stock_status == "in_stock"
        assert second.stock_status == "low_stock"
        assert first.purchase_amount == 100.0
        assert first.balance_amount == 100.0
        assert first.payment_status == "pending"
        assert medicine.expiry_date == date(2025, 3, 1)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"price": 0}, "Price"),
        ({"quantity": 0}, "Quantity"),
        ({"quantity": 2.5}, "whole number"),
        ({"name": "  "}, "Product name"),
        ({"expiry_date": "2024-02-01"}, "Expiry date"),
        ({"payment_type": "barter"}, "Payment type"),
    ],
)
def test_create_product_rejects_invalid_input(tmp_path: Path, overrides: dict[str, object], message: str) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        with pytest.raises(ValueError, match=message):
            CatalogService(session).create_product("medicine", _product_payload(**overrides))


def test_update_product_recomputes_purchase_amount(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        product = catalog.create_product("general", _product_payload(price=10, quantity=5))
        updated = catalog.update_product("general", product.id, {"quantity": 8})
        assert updated.purchase_amount == 80.0
        assert updated.current_stock == 8
        assert updated.balance_amount == 80.0
        # aggregate columns are never taken from input
        catalog.update_product("general", product.id, {"balance_stock": 999, "description": "A4 paper"})
        assert product.balance_stock == 8
        assert product.description == "A4 paper"


def test_delete_product_scoped_to_domain(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        product = catalog.create_product("grocery", _product_payload())
        with pytest.raises(RecordNotFound):
            catalog.get_product("medicine", product.id)
        catalog.delete_product("grocery", product.id)
        assert catalog.list_products("grocery") == []
