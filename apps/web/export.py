"""CSV rendering for the console screens."""
from __future__ import annotations

import calendar
import csv
import io
from datetime import date, datetime
from typing import Callable, Mapping, Optional, Sequence

from fastapi.responses import Response

CATEGORY_HEADERS: tuple[str, ...] = ("S No", "Date", "Category Name", "Description", "Status")
SUPPLIER_HEADERS: tuple[str, ...] = (
    "S No",
    "Date",
    "Company Name",
    "Contact Person",
    "Email",
    "Phone",
    "Address",
    "Status",
)
PRODUCT_HEADERS: tuple[str, ...] = (
    "S No",
    "Date",
    "Name",
    "Category",
    "Supplier",
    "Price",
    "Quantity",
    "Status",
    "Description",
)
MEDICINE_PRODUCT_HEADERS: tuple[str, ...] = (
    "S No",
    "Date",
    "Medicine Name",
    "Category",
    "Manufacturer",
    "Supplier",
    "Batch Number",
    "Expiry Date",
    "Quantity",
    "Price",
    "Status",
)
STOCK_HEADERS: Mapping[str, tuple[str, ...]] = {
    "general": (
        "S No",
        "Date",
        "Product Name",
        "Category",
        "Current Stock",
        "Used Stock",
        "Available",
        "Unit",
        "Price",
        "Supplier",
        "Status",
    ),
    "grocery": (
        "S No",
        "Date",
        "GR ID",
        "Product Name",
        "Category",
        "Current Stock",
        "Used Stock",
        "Balance",
        "Unit",
        "Supplier",
        "Price",
        "Status",
    ),
    "medicine": (
        "S No",
        "ID No",
        "Product Name",
        "Category",
        "Current Stock",
        "Used Stock",
        "Balance Stock",
        "Status",
        "Last Update",
    ),
}
ACCOUNT_HEADERS: tuple[str, ...] = (
    "S No",
    "ID No",
    "Product Name",
    "Category",
    "Supplier",
    "Quantity",
    "Rate",
    "Purchase Amount",
    "Settlement Amount",
    "Balance Amount",
    "Status",
    "Payment Type",
)
ROLE_HEADERS: tuple[str, ...] = (
    "S No",
    "Role Name",
    "Description",
    "Permissions Count",
    "Status",
    "Created Date",
)
STAFF_HEADERS: tuple[str, ...] = (
    "S No",
    "Staff ID",
    "Name",
    "Email",
    "Phone",
    "Role",
    "Department",
    "Address",
    "Join Date",
    "Salary",
    "Status",
)

RowBuilder = Callable[[Mapping[str, object]], dict[str, str]]


def render_csv(rows: Sequence[Mapping[str, str]], headers: Sequence[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(headers),
        extrasaction="ignore",
        lineterminator="\r\n",
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({key: row.get(key, "") for key in headers})
    return buffer.getvalue()


def csv_response(text: str, *, filename: str) -> Response:
    payload = text if text.startswith("\ufeff") else f"\ufeff{text}"
    return Response(
        payload,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def export_filename(screen: str, month: Optional[int] = None, year: Optional[int] = None) -> str:
    """``general_stock_March_2024.csv`` when filtered by month, ``general_stock.csv`` otherwise."""

    if month is not None and year is not None:
        return f"{screen}_{calendar.month_name[month]}_{year}.csv"
    if month is not None:
        return f"{screen}_{calendar.month_name[month]}.csv"
    if year is not None:
        return f"{screen}_{year}.csv"
    return f"{screen}.csv"


def format_date(value: object) -> str:
    """Render ISO dates and datetimes as ``dd/mm/yyyy``."""

    if value in (None, ""):
        return ""
    if isinstance(value, datetime):
        parsed: date = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        try:
            parsed = date.fromisoformat(str(value)[:10])
        except ValueError:
            return str(value)
    return parsed.strftime("%d/%m/%Y")


def stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}"
    return str(value)


def status_label(value: object) -> str:
    return stringify(value).replace("_", " ").title()


def build_rows(records: Sequence[Mapping[str, object]], builder: RowBuilder) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for index, record in enumerate(records, start=1):
        row = builder(record)
        row["S No"] = str(index)
        rows.append(row)
    return rows


def category_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "Date": format_date(record.get("created_at")),
        "Category Name": stringify(record.get("name")),
        "Description": stringify(record.get("description")),
        "Status": status_label(record.get("status")),
    }


def supplier_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "Date": format_date(record.get("created_at")),
        "Company Name": stringify(record.get("name")),
        "Contact Person": stringify(record.get("contact_person")),
        "Email": stringify(record.get("email")),
        "Phone": stringify(record.get("phone")),
        "Address": stringify(record.get("address")),
        "Status": status_label(record.get("status")),
    }


def product_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "Date": format_date(record.get("purchase_date")),
        "Name": stringify(record.get("name")),
        "Medicine Name": stringify(record.get("name")),
        "Category": stringify(record.get("category")),
        "Supplier": stringify(record.get("supplier")),
        "Manufacturer": stringify(record.get("manufacturer")),
        "Batch Number": stringify(record.get("batch_number")),
        "Expiry Date": format_date(record.get("expiry_date")),
        "Price": stringify(record.get("price")),
        "Quantity": stringify(record.get("quantity")),
        "Status": status_label(record.get("status")),
        "Description": stringify(record.get("description")),
    }


def stock_row(record: Mapping[str, object]) -> dict[str, str]:
    balance = stringify(record.get("balance_stock"))
    return {
        "Date": format_date(record.get("purchase_date")),
        "ID No": stringify(record.get("code")),
        "GR ID": stringify(record.get("code")),
        "Product Name": stringify(record.get("name")),
        "Category": stringify(record.get("category")),
        "Current Stock": stringify(record.get("current_stock")),
        "Used Stock": stringify(record.get("used_stock")),
        "Available": balance,
        "Balance": balance,
        "Balance Stock": balance,
        "Unit": stringify(record.get("unit")),
        "Price": stringify(record.get("price")),
        "Supplier": stringify(record.get("supplier")),
        "Status": status_label(record.get("display_status") or record.get("stock_status")),
        "Last Update": format_date(record.get("last_update")),
    }


def account_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "ID No": stringify(record.get("code")),
        "Product Name": stringify(record.get("name")),
        "Category": stringify(record.get("category")),
        "Supplier": stringify(record.get("supplier")),
        "Quantity": stringify(record.get("quantity")),
        "Rate": stringify(record.get("price")),
        "Purchase Amount": stringify(record.get("purchase_amount")),
        "Settlement Amount": stringify(record.get("settlement_amount")),
        "Balance Amount": stringify(record.get("balance_amount")),
        "Status": status_label(record.get("payment_status")),
        "Payment Type": status_label(record.get("payment_type")),
    }


def role_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "Role Name": stringify(record.get("name")),
        "Description": stringify(record.get("description")),
        "Permissions Count": stringify(record.get("permissions_count")),
        "Status": status_label(record.get("status")),
        "Created Date": format_date(record.get("created_at")),
    }


def staff_row(record: Mapping[str, object]) -> dict[str, str]:
    return {
        "Staff ID": stringify(record.get("id")),
        "Name": stringify(record.get("name")),
        "Email": stringify(record.get("email")),
        "Phone": stringify(record.get("phone")),
        "Role": stringify(record.get("role")),
        "Department": stringify(record.get("department")),
        "Address": stringify(record.get("address")),
        "Join Date": format_date(record.get("join_date")),
        "Salary": stringify(record.get("salary")),
        "Status": stringify(record.get("status")),
    }


__all__ = [
    "ACCOUNT_HEADERS",
    "CATEGORY_HEADERS",
    "MEDICINE_PRODUCT_HEADERS",
    "PRODUCT_HEADERS",
    "ROLE_HEADERS",
    "STAFF_HEADERS",
    "STOCK_HEADERS",
    "SUPPLIER_HEADERS",
    "account_row",
    "build_rows",
    "category_row",
    "csv_response",
    "export_filename",
    "format_date",
    "product_row",
    "render_csv",
    "role_row",
    "staff_row",
    "stock_row",
    "stringify",
    "supplier_row",
]
