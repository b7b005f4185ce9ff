"""Filtering, sorting, paging and summaries shared by every console screen."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Mapping, MutableMapping, Optional, Sequence

from services.catalog import code_number

Record = MutableMapping[str, object]


@dataclass
class ListQuery:
    """Filters accepted by every list endpoint."""

    search: str = ""
    status: str = ""
    category: str = ""
    month: Optional[int] = None
    year: Optional[int] = None
    page: int = 1
    page_size: int = 10
    clamped: bool = False

    def active_filters(self) -> dict[str, object]:
        return {
            "search": self.search,
            "status": self.status,
            "category": self.category,
            "month": self.month,
            "year": self.year,
        }


@dataclass
class Page:
    """One page of a filtered list plus the numbers behind "Showing X to Y of Z"."""

    items: List[Record] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0
    total_pages: int = 1
    start: int = 0
    end: int = 0

    def meta(self) -> dict[str, object]:
        return {
            "total": self.total,
            "count": len(self.items),
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "start": self.start,
            "end": self.end,
        }


def _as_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def matches_search(record: Mapping[str, object], fields: Sequence[str], term: str) -> bool:
    """Case-insensitive substring match on any of ``fields``."""

    needle = (term or "").strip().lower()
    if not needle:
        return True
    for key in fields:
        value = record.get(key)
        if value is not None and needle in str(value).lower():
            return True
    return False


def in_month(value: object, month: Optional[int], year: Optional[int]) -> bool:
    """Return True when ``value`` falls inside the month/year filter (month is 1-based)."""

    if month is None and year is None:
        return True
    when = _as_date(value)
    if when is None:
        return False
    if year is not None and when.year != year:
        return False
    if month is not None and when.month != month:
        return False
    return True


def stock_visible(
    item: Mapping[str, object],
    month: Optional[int],
    year: Optional[int],
    *,
    today: Optional[date] = None,
    date_field: str = "purchase_date",
) -> bool:
    """Month filter for stock screens.

    For the current month, items bought earlier still show while they have
    balance left; any other month shows only items bought in that month.
    """

    if month is None or year is None:
        return in_month(item.get(date_field), month, year)
    reference = today or date.today()
    if in_month(item.get(date_field), month, year):
        return True
    if (month, year) != (reference.month, reference.year):
        return False
    purchased = _as_date(item.get(date_field))
    if purchased is None or purchased >= date(year, month, 1):
        return False
    return float(item.get("balance_stock") or 0) > 0


def apply_filters(
    records: Iterable[Record],
    query: ListQuery,
    *,
    search_fields: Sequence[str],
    date_field: str = "created_at",
    status_field: str = "status",
    carry_forward: bool = False,
    today: Optional[date] = None,
) -> List[Record]:
    status_filter = query.status.strip().lower()
    category_filter = query.category.strip().lower()
    filtered: List[Record] = []
    for record in records:
        if not matches_search(record, search_fields, query.search):
            continue
        if status_filter and status_filter != "all":
            if str(record.get(status_field) or "").lower() != status_filter:
                continue
        if category_filter and category_filter != "all":
            if str(record.get("category") or "").lower() != category_filter:
                continue
        if carry_forward:
            if not stock_visible(record, query.month, query.year, today=today, date_field=date_field):
                continue
        elif not in_month(record.get(date_field), query.month, query.year):
            continue
        filtered.append(record)
    return filtered


def sort_by_code(records: Iterable[Record], key: str = "code") -> List[Record]:
    """Order by the numeric part of a generated code (``GP0012``, ``STF003``)."""

    return sorted(records, key=lambda record: (code_number(str(record.get(key) or "")), record.get("id") or 0))


def paginate(records: Sequence[Record], page: int, page_size: int) -> Page:
    total = len(records)
    size = max(1, page_size)
    total_pages = max(1, math.ceil(total / size))
    current = min(max(1, page), total_pages)
    offset = (current - 1) * size
    items = list(records[offset : offset + size])
    start = offset + 1 if items else 0
    end = offset + len(items)
    return Page(
        items=items,
        page=current,
        page_size=size,
        total=total,
        total_pages=total_pages,
        start=start,
        end=end,
    )


def display_stock_status(item: Mapping[str, object], *, today: Optional[date] = None) -> str:
    """Stock status with ``expired`` taking precedence once the expiry date passes."""

    expiry = _as_date(item.get("expiry_date"))
    if expiry is not None and expiry < (today or date.today()):
        return "expired"
    return str(item.get("stock_status") or "in_stock")


def stock_summary(items: Sequence[Mapping[str, object]]) -> dict[str, object]:
    counts = {"in_stock": 0, "low_stock": 0, "out_of_stock": 0, "expired": 0}
    for item in items:
        status = str(item.get("display_status") or item.get("stock_status") or "in_stock")
        if status in counts:
            counts[status] += 1
    return {
        "products": len(items),
        "current_stock": sum(int(item.get("current_stock") or 0) for item in items),
        "used_stock": sum(int(item.get("used_stock") or 0) for item in items),
        "balance_stock": sum(int(item.get("balance_stock") or 0) for item in items),
        "stock_value": round(
            sum(float(item.get("price") or 0) * int(item.get("balance_stock") or 0) for item in items), 2
        ),
        **counts,
    }


def account_summary(items: Sequence[Mapping[str, object]]) -> dict[str, object]:
    counts = {"pending": 0, "partial": 0, "completed": 0}
    for item in items:
        status = str(item.get("payment_status") or "pending")
        if status in counts:
            counts[status] += 1
    return {
        "accounts": len(items),
        "purchase_amount": round(sum(float(item.get("purchase_amount") or 0) for item in items), 2),
        "settlement_amount": round(sum(float(item.get("settlement_amount") or 0) for item in items), 2),
        "balance_amount": round(sum(float(item.get("balance_amount") or 0) for item in items), 2),
        **counts,
    }


__all__ = [
    "ListQuery",
    "Page",
    "account_summary",
    "apply_filters",
    "display_stock_status",
    "in_month",
    "matches_search",
    "paginate",
    "sort_by_code",
    "stock_summary",
    "stock_visible",
]
