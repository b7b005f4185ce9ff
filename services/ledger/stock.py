"""Stock history ledger."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from packages.db import Product, StockEntry
from services.catalog.errors import RecordNotFound
from services.catalog.fields import coerce_date

from .aggregates import (
    ADDITION_TYPES,
    CONSUMPTION_TYPES,
    STOCK_TYPES,
    lock_product,
    low_stock_threshold,
    recompute_stock,
)

LOGGER = logging.getLogger("carestore.ledger.stock")


class StockLedger:
    """Append and remove stock movements, keeping product aggregates in sync."""

    def __init__(self, session: Session, *, thresholds: Mapping[str, int] | None = None) -> None:
        self.session = session
        self.thresholds = thresholds

    def history(self, product_id: int, *, domain: Optional[str] = None) -> List[StockEntry]:
        self._product(product_id, domain=domain)
        stmt = (
            select(StockEntry)
            .where(StockEntry.product_id == product_id)
            .order_by(StockEntry.update_date.desc(), StockEntry.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def record(
        self,
        product_id: int,
        *,
        stock_change: object,
        stock_type: str | None = None,
        update_date: object = None,
        description: str | None = None,
        domain: Optional[str] = None,
    ) -> StockEntry:
        """Append a movement and return the stored entry.

        Consumption (``used``/``expired``) and additions (``purchased``/``returned``)
        are positive quantities; ``adjusted`` is signed.
        """

        kind = (stock_type or "used").strip().lower()
        if kind not in STOCK_TYPES:
            raise ValueError(f"Stock type must be one of: {', '.join(STOCK_TYPES)}")
        change = _coerce_change(stock_change)
        when = coerce_date(update_date, field="Update date") or date.today()

        product = lock_product(self.session, product_id, domain=domain)
        before = product.balance_stock
        if kind in CONSUMPTION_TYPES:
            if change <= 0:
                raise ValueError("Usage must be greater than zero")
            if change > before:
                raise ValueError(f"Usage cannot exceed available stock ({before})")
            after = before - change
        elif kind in ADDITION_TYPES:
            if change <= 0:
                raise ValueError("Added stock must be greater than zero")
            after = before + change
        else:
            if change == 0:
                raise ValueError("Adjustment cannot be zero")
            after = before + change
            if after < 0:
                raise ValueError(f"Adjustment cannot exceed available stock ({before})")

        entry = StockEntry(
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            supplier=product.supplier,
            purchase_date=product.purchase_date,
            stock_change=change,
            stock_type=kind,
            current_stock_before=before,
            current_stock_after=after,
            update_date=when,
            description=(description or "").strip() or None,
        )
        self.session.add(entry)
        recompute_stock(self.session, product, self._threshold(product))
        product.last_update = when
        self.session.flush()
        self.session.refresh(entry)
        LOGGER.info(
            "Recorded %s movement of %s for product %s (balance %s -> %s)",
            kind,
            change,
            product.code,
            before,
            product.balance_stock,
        )
        return entry

    def delete(self, entry_id: int, *, domain: Optional[str] = None) -> Product:
        """Remove a movement and return the product with recomputed stock."""

        entry = self.session.get(StockEntry, entry_id)
        if entry is None:
            raise RecordNotFound("stock entry", entry_id)
        try:
            product = lock_product(self.session, entry.product_id, domain=domain)
        except RecordNotFound as exc:
            raise RecordNotFound("stock entry", entry_id) from exc
        self.session.delete(entry)
        recompute_stock(self.session, product, self._threshold(product))
        product.last_update = date.today()
        LOGGER.info("Deleted stock entry %s for product %s", entry_id, product.code)
        return product

    def reset_usage(self, product_id: int, *, domain: Optional[str] = None) -> tuple[Product, int]:
        """Drop every consumption entry so used stock returns to zero."""

        product = lock_product(self.session, product_id, domain=domain)
        result = self.session.execute(
            delete(StockEntry)
            .where(StockEntry.product_id == product.id)
            .where(StockEntry.stock_type.in_(CONSUMPTION_TYPES))
            .execution_options(synchronize_session=False)
        )
        removed = int(result.rowcount or 0)
        recompute_stock(self.session, product, self._threshold(product))
        product.last_update = date.today()
        LOGGER.info("Reset usage for product %s (%s entries removed)", product.code, removed)
        return product, removed

    def _product(self, product_id: int, *, domain: Optional[str]) -> Product:
        product = self.session.get(Product, product_id)
        if product is None or (domain is not None and product.domain != domain):
            raise RecordNotFound("product", product_id)
        return product

    def _threshold(self, product: Product) -> int:
        return low_stock_threshold(product.domain, self.thresholds)


def _coerce_change(value: object) -> int:
    if value in (None, "") or isinstance(value, bool):
        raise ValueError("Stock change is required")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError("Stock change must be a number") from exc
    if not number.is_integer():
        raise ValueError("Stock change must be a whole number")
    return int(number)


__all__ = ["StockLedger"]
