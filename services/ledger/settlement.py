"""Settlement history ledger."""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from packages.db import Product, SettlementEntry
from services.catalog.errors import RecordNotFound
from services.catalog.fields import coerce_date, coerce_positive

from .aggregates import PAYMENT_TYPES, lock_product, recompute_account

LOGGER = logging.getLogger("carestore.ledger.settlement")


class SettlementLedger:
    """Record payments against purchases and keep account balances current."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def history(self, product_id: int, *, domain: Optional[str] = None) -> List[SettlementEntry]:
        product = self.session.get(Product, product_id)
        if product is None or (domain is not None and product.domain != domain):
            raise RecordNotFound("product", product_id)
        stmt = (
            select(SettlementEntry)
            .where(SettlementEntry.product_id == product_id)
            .order_by(SettlementEntry.payment_date.asc(), SettlementEntry.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def record(
        self,
        product_id: int,
        *,
        amount: object,
        payment_date: object,
        payment_type: str | None = None,
        description: str | None = None,
        domain: Optional[str] = None,
    ) -> SettlementEntry:
        value = round(coerce_positive(amount, field="Amount"), 2)
        paid_on = coerce_date(payment_date, field="Payment date")
        if paid_on is None:
            raise ValueError("Payment date is required")
        kind = (payment_type or "cash").strip().lower()
        if kind not in PAYMENT_TYPES:
            raise ValueError(f"Payment type must be one of: {', '.join(PAYMENT_TYPES)}")

        product = lock_product(self.session, product_id, domain=domain)
        outstanding = round(product.purchase_amount - product.settlement_amount, 2)
        if value > outstanding:
            raise ValueError(f"Amount exceeds the outstanding balance ({outstanding:.2f})")

        entry = SettlementEntry(
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            supplier=product.supplier,
            purchase_date=product.purchase_date,
            amount=value,
            payment_date=paid_on,
            payment_type=kind,
            description=(description or "").strip() or None,
        )
        self.session.add(entry)
        recompute_account(self.session, product)
        product.payment_type = kind
        self.session.flush()
        self.session.refresh(entry)
        LOGGER.info(
            "Recorded %s payment of %.2f for product %s (balance %.2f)",
            kind,
            value,
            product.code,
            product.balance_amount,
        )
        return entry

    def delete(self, entry_id: int, *, domain: Optional[str] = None) -> Product:
        entry = self.session.get(SettlementEntry, entry_id)
        if entry is None:
            raise RecordNotFound("settlement", entry_id)
        try:
            product = lock_product(self.session, entry.product_id, domain=domain)
        except RecordNotFound as exc:
            raise RecordNotFound("settlement", entry_id) from exc
        self.session.delete(entry)
        recompute_account(self.session, product)
        LOGGER.info("Deleted settlement %s for product %s", entry_id, product.code)
        return product


__all__ = ["SettlementLedger"]
