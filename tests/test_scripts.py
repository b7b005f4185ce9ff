from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect

from packages.db import get_engine, session_scope
from scripts.db_migrate import run as run_migration
from scripts.seed_catalog import load_seed, run as run_seed
from services.access import PAGE_IDS, RoleService
from services.catalog import CatalogService


def test_migration_creates_tables(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "carestore.db"
    result = run_migration(db_path)

    assert result == db_path
    tables = set(inspect(get_engine(db_path)).get_table_names())
    assert {"categories", "suppliers", "products", "stock_history", "settlement_history", "roles", "staff"} <= tables


def test_default_seed_loads_once(tmp_path: Path) -> None:
    db_path = tmp_path / "seeded.db"
    created = run_seed(db_path)
    assert created == {"categories": 14, "suppliers": 4, "roles": 3}

    again = run_seed(db_path)
    assert again == {"categories": 0, "suppliers": 0, "roles": 0}

    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        grocery = {category.name for category in catalog.list_categories("grocery")}
        assert {"Vegetables", "Spices", "Others"} <= grocery
        suppliers = [supplier.name for supplier in catalog.list_suppliers("medicine")]
        assert sorted(suppliers) == ["HealthCare Solutions", "MediSupply Inc", "PharmaCorp Ltd"]
        roles = RoleService(session)
        assert roles.permissions_for("Super Admin") == list(PAGE_IDS)
        assert roles.has_permission("Pharmacist", "medicine-accounts")


def test_seed_file_is_validated(tmp_path: Path) -> None:
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text("categories:\n  pharmacy:\n    - name: Tablets\n", encoding="utf-8")
    with pytest.raises(ValueError, match="schema validation"):
        load_seed(seed_path)

    seed_path.write_text("roles:\n  - description: missing name\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed(seed_path)


def test_migration_reset_drops_existing_rows(tmp_path: Path) -> None:
    db_path = tmp_path / "reset.db"
    run_seed(db_path)

    run_migration(db_path, reset=True)

    with session_scope(db_path) as session:
        assert CatalogService(session).list_categories("grocery") == []
        assert RoleService(session).list() == []
