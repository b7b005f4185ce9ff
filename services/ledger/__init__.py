"""Stock and settlement ledgers with server-side aggregates."""
from .aggregates import (
    CONSUMPTION_TYPES,
    DEFAULT_LOW_STOCK,
    PAYMENT_TYPES,
    STOCK_TYPES,
    derive_payment_status,
    derive_stock_status,
    low_stock_threshold,
    recompute_account,
    recompute_stock,
)
from .settlement import SettlementLedger
from .stock import StockLedger

__all__ = [
    "CONSUMPTION_TYPES",
    "DEFAULT_LOW_STOCK",
    "PAYMENT_TYPES",
    "STOCK_TYPES",
    "SettlementLedger",
    "StockLedger",
    "derive_payment_status",
    "derive_stock_status",
    "low_stock_threshold",
    "recompute_account",
    "recompute_stock",
]
