from __future__ import annotations

from pathlib import Path

import pytest

from packages.db import create_all, session_scope
from services.access import PAGE_IDS, PAGES, RoleService, group_pages, is_admin_role, resolve_permissions
from services.catalog import RecordConflict, RecordNotFound
from services.staff import StaffService


def _db(tmp_path: Path) -> Path:
    db_path = tmp_path / "access.db"
    create_all(db_path)
    return db_path


def test_page_catalogue_is_grouped_by_section() -> None:
    assert len(PAGES) == len(set(PAGE_IDS)) == 24
    grouped = group_pages()
    assert [page["id"] for page in grouped["Medicine Management"]][:2] == ["add-medicine", "medicine-categories"]
    assert "settings" in {page["id"] for page in grouped["Settings"]}


def test_admin_names_receive_every_page() -> None:
    assert is_admin_role("Admin")
    assert is_admin_role("  super   ADMIN ")
    assert is_admin_role("Regional Super Admin")
    assert not is_admin_role("Pharmacist")
    assert resolve_permissions("Administrator", []) == list(PAGE_IDS)


def test_resolve_permissions_filters_unknown_and_duplicates() -> None:
    requested = ["medicine-stock", "unknown", " medicine-stock ", 7, "dashboard"]
    assert resolve_permissions("Pharmacist", requested) == ["medicine-stock", "dashboard"]


def test_role_crud_and_permission_checks(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        roles = RoleService(session)
        role = roles.create({"name": "Pharmacist", "permissions": "dashboard, medicine-stock"})
        assert roles.permissions_for("pharmacist") == ["dashboard", "medicine-stock"]
        assert roles.has_permission("Pharmacist", "medicine-stock")
        assert not roles.has_permission("Pharmacist", "staff-list")
        assert roles.has_permission("Super Admin", "staff-list")
        assert roles.permissions_for("Nobody") == []

        with pytest.raises(RecordConflict):
            roles.create({"name": "PHARMACIST"})
        with pytest.raises(ValueError):
            roles.create({"name": "Cashier", "permissions": 5})

        roles.update(role.id, {"status": "inactive"})
        assert roles.permissions_for("Pharmacist") == []

    with session_scope(db_path) as session:
        with pytest.raises(RecordNotFound):
            RoleService(session).get(999)


def test_role_rename_updates_staff_and_blocks_delete(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        roles = RoleService(session)
        role = roles.create({"name": "Cashier", "permissions": ["grocery-stock"]})
        member = StaffService(session).create({"name": "Asha", "role": "cashier"})

        roles.update(role.id, {"name": "Front Desk"})
        assert member.role == "Front Desk"
        assert roles.permissions_for("Front Desk") == ["grocery-stock"]

        with pytest.raises(RecordConflict, match="1 staff"):
            roles.delete(role.id)

        StaffService(session).soft_delete(member.id)
        roles.delete(role.id)
        assert roles.list() == []
