"""Inventory catalogue services."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

_EXPORTS = {
    "ConsoleError": ("services.catalog.errors", "ConsoleError"),
    "RecordConflict": ("services.catalog.errors", "RecordConflict"),
    "RecordNotFound": ("services.catalog.errors", "RecordNotFound"),
    "CODE_PREFIXES": ("services.catalog.service", "CODE_PREFIXES"),
    "CatalogService": ("services.catalog.service", "CatalogService"),
    "code_number": ("services.catalog.service", "code_number"),
    "next_product_code": ("services.catalog.service", "next_product_code"),
    "validate_domain": ("services.catalog.service", "validate_domain"),
}

__all__ = list(_EXPORTS.keys())

if TYPE_CHECKING:  # pragma: no cover - import side effects only for typing
    from .errors import ConsoleError, RecordConflict, RecordNotFound
    from .service import CODE_PREFIXES, CatalogService, code_number, next_product_code, validate_domain


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if not target:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(target[0])
    value = getattr(module, target[1])
    globals()[name] = value
    return value
