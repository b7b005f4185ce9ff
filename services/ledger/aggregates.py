"""Server-side recomputation of product stock and account aggregates."""
from __future__ import annotations

from typing import Mapping, Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from packages.db import Product, SettlementEntry, StockEntry
from services.catalog.errors import RecordConflict, RecordNotFound

CONSUMPTION_TYPES: tuple[str, ...] = ("used", "expired")
ADDITION_TYPES: tuple[str, ...] = ("purchased", "returned")
STOCK_TYPES: tuple[str, ...] = ("purchased", "used", "adjusted", "expired", "returned")
PAYMENT_TYPES: tuple[str, ...] = ("cash", "credit", "bank_transfer", "cheque", "upi", "card")
DEFAULT_LOW_STOCK: Mapping[str, int] = {"general": 5, "grocery": 5, "medicine": 10}


def derive_stock_status(balance: int, threshold: int) -> str:
    """Classify a balance as ``out_of_stock``, ``low_stock`` or ``in_stock``."""

    if balance <= 0:
        return "out_of_stock"
    if balance <= threshold:
        return "low_stock"
    return "in_stock"


def derive_payment_status(purchase_amount: float, settled: float) -> str:
    """Classify an account as ``completed``, ``partial`` or ``pending``."""

    if round(purchase_amount - settled, 2) <= 0:
        return "completed"
    if settled > 0:
        return "partial"
    return "pending"


def low_stock_threshold(domain: str, thresholds: Mapping[str, int] | None = None) -> int:
    source = thresholds or DEFAULT_LOW_STOCK
    return int(source.get(domain, DEFAULT_LOW_STOCK.get(domain, 5)))


def lock_product(session: Session, product_id: int, *, domain: Optional[str] = None) -> Product:
    """Load a product row for update, scoped to ``domain`` when given."""

    stmt = select(Product).where(Product.id == product_id).with_for_update()
    if domain is not None:
        stmt = stmt.where(Product.domain == domain)
    product = session.execute(stmt).scalar_one_or_none()
    if product is None:
        raise RecordNotFound("product", product_id)
    return product


def stock_totals(session: Session, product_id: int) -> tuple[int, int]:
    """Return ``(added, consumed)`` summed over a product's stock history."""

    consumed_expr = case((StockEntry.stock_type.in_(CONSUMPTION_TYPES), StockEntry.stock_change), else_=0)
    added_expr = case((StockEntry.stock_type.in_(CONSUMPTION_TYPES), 0), else_=StockEntry.stock_change)
    stmt = select(
        func.coalesce(func.sum(added_expr), 0),
        func.coalesce(func.sum(consumed_expr), 0),
    ).where(StockEntry.product_id == product_id)
    added, consumed = session.execute(stmt).one()
    return int(added), int(consumed)


def recompute_stock(session: Session, product: Product, threshold: int) -> Product:
    """Rebuild current, used and balance stock from the ledger.

    Raises ``RecordConflict`` when the ledger would leave a negative balance;
    the caller's transaction is expected to roll back.
    """

    session.flush()
    added, consumed = stock_totals(session, product.id)
    current = product.quantity + added
    balance = current - consumed
    if current < 0 or balance < 0:
        raise RecordConflict(
            f"Stock for {product.name} would drop below zero (current {current}, used {consumed})"
        )
    product.current_stock = current
    product.used_stock = consumed
    product.balance_stock = balance
    product.stock_status = derive_stock_status(balance, threshold)
    return product


def recompute_account(session: Session, product: Product) -> Product:
    """Rebuild settlement and balance amounts from the settlement ledger.

    Raises ``RecordConflict`` when the settled total would pass the purchase
    amount, which covers payments committed after the caller read the row.
    """

    session.flush()
    stmt = select(func.coalesce(func.sum(SettlementEntry.amount), 0.0)).where(
        SettlementEntry.product_id == product.id
    )
    settled = round(float(session.execute(stmt).scalar_one()), 2)
    balance = round(product.purchase_amount - settled, 2)
    if balance < 0:
        raise RecordConflict(
            f"Payments for {product.name} would exceed the purchase amount "
            f"(purchase {product.purchase_amount:.2f}, settled {settled:.2f})"
        )
    product.settlement_amount = settled
    product.balance_amount = balance
    product.payment_status = derive_payment_status(product.purchase_amount, settled)
    return product


__all__ = [
    "ADDITION_TYPES",
    "CONSUMPTION_TYPES",
    "DEFAULT_LOW_STOCK",
    "PAYMENT_TYPES",
    "STOCK_TYPES",
    "derive_payment_status",
    "derive_stock_status",
    "lock_product",
    "low_stock_threshold",
    "recompute_account",
    "recompute_stock",
    "stock_totals",
]
