"""Catalogue of console pages that roles can be granted."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence


@dataclass(frozen=True)
class Page:
    """A page a role may be permitted to open."""

    id: str
    name: str
    route: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "route": self.route, "category": self.category}


PAGES: tuple[Page, ...] = (
    Page("dashboard", "Dashboard", "/dashboard", "Main"),
    Page("add-staff", "Add Staff", "/management/add-staff", "Staff Management"),
    Page("staff-list", "Staff List", "/management/staff", "Staff Management"),
    Page("salary-payment", "Salary Payment", "/management/salary-payment", "Staff Management"),
    Page("deleted-staff", "Deleted Staff", "/management/deleted-staff", "Staff Management"),
    Page("add-medicine", "Add Medicine", "/medicine/add", "Medicine Management"),
    Page("medicine-categories", "Medicine Categories", "/medicine/categories", "Medicine Management"),
    Page("medicine-suppliers", "Medicine Suppliers", "/medicine/suppliers", "Medicine Management"),
    Page("medicine-stock", "Medicine Stock", "/medicine/stock", "Medicine Management"),
    Page("medicine-accounts", "Medicine Accounts", "/medicine/accounts", "Medicine Management"),
    Page("add-grocery", "Add Grocery", "/grocery", "Grocery Management"),
    Page("grocery-categories", "Grocery Categories", "/grocery/categories", "Grocery Management"),
    Page("grocery-suppliers", "Grocery Suppliers", "/grocery/suppliers", "Grocery Management"),
    Page("grocery-stock", "Grocery Stock", "/grocery/stock", "Grocery Management"),
    Page("grocery-accounts", "Grocery Accounts", "/grocery/accounts", "Grocery Management"),
    Page("add-products", "Add Products", "/general/add", "General Purchase"),
    Page("general-categories", "General Categories", "/general/categories", "General Purchase"),
    Page("general-suppliers", "General Suppliers", "/general/suppliers", "General Purchase"),
    Page("general-stock", "General Stock", "/general/stock", "General Purchase"),
    Page("general-accounts", "General Accounts", "/general/accounts", "General Purchase"),
    Page("administration", "Administration", "/administration", "User Management"),
    Page("add-role", "Add Role", "/management/user-role/add", "User Management"),
    Page("role-management", "Role Management", "/management/user-role/roles", "User Management"),
    Page("settings", "Settings", "/settings", "Settings"),
)

PAGE_IDS: tuple[str, ...] = tuple(page.id for page in PAGES)
_ADMIN_NAMES = {"admin", "administrator", "super admin"}


def is_admin_role(name: str | None) -> bool:
    """Return True for role names that implicitly hold every permission."""

    normalized = " ".join((name or "").lower().split())
    return normalized in _ADMIN_NAMES or "super admin" in normalized


def resolve_permissions(name: str | None, requested: Iterable[object] | None) -> List[str]:
    """Filter ``requested`` down to known page ids; admins receive every page."""

    if is_admin_role(name):
        return list(PAGE_IDS)
    known = set(PAGE_IDS)
    resolved: List[str] = []
    for item in requested or ():
        if not isinstance(item, str):
            continue
        page_id = item.strip()
        if page_id in known and page_id not in resolved:
            resolved.append(page_id)
    return resolved


def group_pages(pages: Sequence[Page] = PAGES) -> dict[str, list[dict[str, str]]]:
    grouped: dict[str, list[dict[str, str]]] = {}
    for page in pages:
        grouped.setdefault(page.category, []).append(page.to_dict())
    return grouped


__all__ = ["PAGES", "PAGE_IDS", "Page", "group_pages", "is_admin_role", "resolve_permissions"]
