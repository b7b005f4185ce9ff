from __future__ import annotations

from datetime import date

from apps.web.views import (
    ListQuery,
    account_summary,
    apply_filters,
    display_stock_status,
    in_month,
    matches_search,
    paginate,
    sort_by_code,
    stock_summary,
    stock_visible,
)


def _records() -> list[dict[str, object]]:
    return [
        {"id": 1, "code": "GR0010", "name": "Basmati Rice", "category": "Grains", "status": "active",
         "purchase_date": "2024-03-02", "balance_stock": 4},
        {"id": 2, "code": "GR0002", "name": "Tomatoes", "category": "Vegetables", "status": "inactive",
         "purchase_date": "2024-02-20", "balance_stock": 0},
        {"id": 3, "code": "GR0001", "name": "Brown Rice", "category": "Grains", "status": "active",
         "purchase_date": "2024-01-15", "balance_stock": 12},
    ]


def test_matches_search_is_case_insensitive_across_fields() -> None:
    record = {"name": "Paracetamol", "supplier": "PharmaCorp Ltd"}
    assert matches_search(record, ("name", "supplier"), "pharma")
    assert matches_search(record, ("name",), "")
    assert not matches_search(record, ("name",), "pharma")


def test_in_month_requires_matching_month_and_year() -> None:
    assert in_month("2024-03-10", 3, 2024)
    assert not in_month("2024-03-10", 4, 2024)
    assert in_month("2024-03-10", None, 2024)
    assert in_month(None, None, None)
    assert not in_month(None, 3, 2024)


def test_apply_filters_combines_search_status_and_category() -> None:
    query = ListQuery(search="rice", status="ACTIVE", category="grains")
    rows = apply_filters(_records(), query, search_fields=("name", "code"), date_field="purchase_date")
    assert [row["id"] for row in rows] == [1, 3]

    query = ListQuery(status="all", category="all", month=2, year=2024)
    rows = apply_filters(_records(), query, search_fields=("name",), date_field="purchase_date")
    assert [row["id"] for row in rows] == [2]


def test_stock_visible_carries_forward_balance_into_current_month() -> None:
    today = date(2024, 3, 20)
    older_with_balance = {"purchase_date": "2024-01-15", "balance_stock": 12}
    older_empty = {"purchase_date": "2024-02-20", "balance_stock": 0}

    assert stock_visible(older_with_balance, 3, 2024, today=today)
    assert not stock_visible(older_empty, 3, 2024, today=today)
    # past months only show their own purchases
    assert not stock_visible(older_with_balance, 2, 2024, today=today)


def test_apply_filters_carry_forward_on_stock_screens() -> None:
    query = ListQuery(month=3, year=2024)
    rows = apply_filters(
        _records(),
        query,
        search_fields=("name",),
        date_field="purchase_date",
        carry_forward=True,
        today=date(2024, 3, 25),
    )
    assert sorted(row["id"] for row in rows) == [1, 3]


def test_sort_by_code_uses_numeric_suffix() -> None:
    rows = sort_by_code(_records())
    assert [row["code"] for row in rows] == ["GR0001", "GR0002", "GR0010"]
    staff = sort_by_code([{"id": "STF010"}, {"id": "STF002"}], key="id")
    assert [row["id"] for row in staff] == ["STF002", "STF010"]


def test_paginate_reports_window_and_clamps_page() -> None:
    records = [{"id": index} for index in range(1, 24)]
    page = paginate(records, 3, 10)
    assert page.meta() == {
        "total": 23,
        "count": 3,
        "page": 3,
        "page_size": 10,
        "total_pages": 3,
        "start": 21,
        "end": 23,
    }

    clamped = paginate(records, 99, 10)
    assert clamped.page == 3

    empty = paginate([], 1, 10)
    assert empty.total_pages == 1
    assert (empty.start, empty.end) == (0, 0)


def test_display_stock_status_prefers_expired() -> None:
    item = {"stock_status": "low_stock", "expiry_date": "2024-01-01"}
    assert display_stock_status(item, today=date(2024, 2, 1)) == "expired"
    assert display_stock_status(item, today=date(2023, 12, 1)) == "low_stock"
    assert display_stock_status({}, today=date(2024, 1, 1)) == "in_stock"


def test_summaries_total_visible_rows() -> None:
    stock = stock_summary(
        [
            {"current_stock": 10, "used_stock": 4, "balance_stock": 6, "price": 2.5, "display_status": "in_stock"},
            {"current_stock": 3, "used_stock": 3, "balance_stock": 0, "price": 1.0, "display_status": "out_of_stock"},
        ]
    )
    assert stock["products"] == 2
    assert stock["balance_stock"] == 6
    assert stock["stock_value"] == 15.0
    assert stock["out_of_stock"] == 1

    accounts = account_summary(
        [
            {"purchase_amount": 100.0, "settlement_amount": 40.0, "balance_amount": 60.0, "payment_status": "partial"},
            {"purchase_amount": 50.0, "settlement_amount": 50.0, "balance_amount": 0.0, "payment_status": "completed"},
        ]
    )
    assert accounts["purchase_amount"] == 150.0
    assert accounts["balance_amount"] == 60.0
    assert accounts["partial"] == 1
    assert accounts["completed"] == 1
