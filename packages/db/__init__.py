"""SQLAlchemy persistence helpers for CareStore."""
from __future__ import annotations

from .core import ensure_db_path, get_db_path
from .models import (
    DOMAINS,
    Base,
    Category,
    Product,
    Role,
    SettlementEntry,
    StaffMember,
    StockEntry,
    Supplier,
    create_all,
    get_engine,
    get_session_factory,
    session_scope,
)

__all__ = [
    "DOMAINS",
    "ensure_db_path",
    "get_db_path",
    "Base",
    "Category",
    "Product",
    "Role",
    "SettlementEntry",
    "StaffMember",
    "StockEntry",
    "Supplier",
    "create_all",
    "get_engine",
    "get_session_factory",
    "session_scope",
]
