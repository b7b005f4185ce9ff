"""Shared plumbing for route modules: sessions, list parameters and responses."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, ContextManager, Mapping, Optional, Sequence, Tuple

from fastapi import HTTPException, Query
from sqlalchemy.orm import Session

from ..config import ConsoleConfig
from ..views import ListQuery, Record, apply_filters, paginate, sort_by_code

SessionProvider = Callable[[], ContextManager[Session]]
TodayProvider = Callable[[], date]


@dataclass
class RouteContext:
    """Collaborators handed to every route module by ``create_app``."""

    session: SessionProvider
    config: ConsoleConfig
    logger: logging.Logger
    today: TodayProvider = date.today

    @property
    def low_stock(self) -> Mapping[str, int]:
        return self.config.low_stock

    def require_api_key(self, candidate: str | None) -> None:
        expected = self.config.api_key
        if not expected:
            return
        if candidate == expected:
            return
        raise HTTPException(401, {"error": "unauthorized"})

    def list_params(
        self,
        search: str | None = Query(None),
        status: str | None = Query(None),
        category: str | None = Query(None),
        month: str | None = Query(None),
        year: str | None = Query(None),
        page: str | None = Query(None),
        page_size: str | None = Query(None),
    ) -> ListQuery:
        pagination = self.config.pagination
        page_value, page_clamped = coerce_int(page, default=1, minimum=1, maximum=100_000)
        size_value, size_clamped = coerce_int(
            page_size,
            default=pagination.page_size,
            minimum=1,
            maximum=pagination.max_page_size,
        )
        month_value, month_clamped = optional_int(month, minimum=1, maximum=12)
        year_value, year_clamped = optional_int(year, minimum=1900, maximum=9999)
        return ListQuery(
            search=(search or "").strip(),
            status=(status or "").strip(),
            category=(category or "").strip(),
            month=month_value,
            year=year_value,
            page=page_value,
            page_size=size_value,
            clamped=page_clamped or size_clamped or month_clamped or year_clamped,
        )

    def filtered(
        self,
        records: Sequence[Record],
        query: ListQuery,
        *,
        search_fields: Sequence[str],
        date_field: str = "created_at",
        status_field: str = "status",
        carry_forward: bool = False,
        code_field: str | None = None,
    ) -> list[Record]:
        items = apply_filters(
            records,
            query,
            search_fields=search_fields,
            date_field=date_field,
            status_field=status_field,
            carry_forward=carry_forward,
            today=self.today(),
        )
        if code_field is not None:
            items = sort_by_code(items, key=code_field)
        return items

    def list_response(
        self,
        records: Sequence[Record],
        filtered: Sequence[Record],
        query: ListQuery,
        *,
        summary: Mapping[str, object] | None = None,
        status_field: str = "status",
    ) -> dict[str, object]:
        page = paginate(filtered, query.page, query.page_size)
        meta: dict[str, object] = {
            **page.meta(),
            "unfiltered_total": len(records),
            "clamped": query.clamped,
            "active_filters": query.active_filters(),
            "filters": {
                "statuses": sorted({str(item.get(status_field)) for item in records if item.get(status_field)}),
                "categories": sorted({str(item.get("category")) for item in records if item.get("category")}),
            },
        }
        if summary is not None:
            meta["summary"] = dict(summary)
        return {"items": page.items, "meta": meta}


def coerce_int(
    raw_value: object,
    *,
    default: int,
    minimum: int,
    maximum: int,
) -> Tuple[int, bool]:
    value = default
    clamped = False
    if raw_value not in (None, ""):
        try:
            value = int(raw_value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            clamped = True
            value = default
    if value < minimum:
        clamped = True
        value = minimum
    if value > maximum:
        clamped = True
        value = maximum
    return value, clamped


def optional_int(raw_value: object, *, minimum: int, maximum: int) -> Tuple[Optional[int], bool]:
    """Parse an optional filter value; out-of-range or junk input disables the filter."""

    if raw_value in (None, "", "all"):
        return None, False
    try:
        value = int(raw_value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None, True
    if value < minimum or value > maximum:
        return None, True
    return value, False


__all__ = ["RouteContext", "SessionProvider", "TodayProvider", "coerce_int", "optional_int"]
