"""Convert ORM rows into JSON-ready dictionaries."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from packages.db import Category, Product, Role, SettlementEntry, StaffMember, StockEntry, Supplier
from services.access import role_permissions
from services.staff import staff_documents

from .views import display_stock_status


def _iso(value: date | datetime | None) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_category(category: Category) -> dict[str, object]:
    return {
        "id": category.id,
        "domain": category.domain,
        "name": category.name,
        "description": category.description,
        "status": category.status,
        "created_at": _iso(category.created_at),
        "updated_at": _iso(category.updated_at),
    }


def serialize_supplier(supplier: Supplier) -> dict[str, object]:
    return {
        "id": supplier.id,
        "domain": supplier.domain,
        "name": supplier.name,
        "contact_person": supplier.contact_person,
        "email": supplier.email,
        "phone": supplier.phone,
        "address": supplier.address,
        "status": supplier.status,
        "created_at": _iso(supplier.created_at),
        "updated_at": _iso(supplier.updated_at),
    }


def serialize_product(product: Product, *, today: Optional[date] = None) -> dict[str, object]:
    data: dict[str, object] = {
        "id": product.id,
        "domain": product.domain,
        "code": product.code,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "supplier": product.supplier,
        "unit": product.unit,
        "price": round(product.price, 2),
        "quantity": product.quantity,
        "status": product.status,
        "purchase_date": _iso(product.purchase_date),
        "current_stock": product.current_stock,
        "used_stock": product.used_stock,
        "balance_stock": product.balance_stock,
        "stock_status": product.stock_status,
        "last_update": _iso(product.last_update),
        "purchase_amount": round(product.purchase_amount, 2),
        "settlement_amount": round(product.settlement_amount, 2),
        "balance_amount": round(product.balance_amount, 2),
        "payment_status": product.payment_status,
        "payment_type": product.payment_type,
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }
    if product.domain == "medicine":
        data["manufacturer"] = product.manufacturer
        data["batch_number"] = product.batch_number
        data["expiry_date"] = _iso(product.expiry_date)
    data["display_status"] = display_stock_status(data, today=today)
    return data


def serialize_stock_entry(entry: StockEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "product_id": entry.product_id,
        "product_name": entry.product_name,
        "category": entry.category,
        "supplier": entry.supplier,
        "purchase_date": _iso(entry.purchase_date),
        "stock_change": entry.stock_change,
        "stock_type": entry.stock_type,
        "current_stock_before": entry.current_stock_before,
        "current_stock_after": entry.current_stock_after,
        "update_date": _iso(entry.update_date),
        "description": entry.description,
        "created_at": _iso(entry.created_at),
    }


def serialize_settlement(entry: SettlementEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "product_id": entry.product_id,
        "product_name": entry.product_name,
        "category": entry.category,
        "supplier": entry.supplier,
        "purchase_date": _iso(entry.purchase_date),
        "amount": round(entry.amount, 2),
        "payment_date": _iso(entry.payment_date),
        "payment_type": entry.payment_type,
        "description": entry.description,
        "created_at": _iso(entry.created_at),
    }


def serialize_role(role: Role) -> dict[str, object]:
    permissions = role_permissions(role)
    return {
        "id": role.id,
        "name": role.name,
        "description": role.description,
        "permissions": permissions,
        "permissions_count": len(permissions),
        "status": role.status,
        "created_at": _iso(role.created_at),
        "updated_at": _iso(role.updated_at),
    }


def serialize_staff(member: StaffMember, *, include_files: bool = False) -> dict[str, object]:
    documents = staff_documents(member)
    data: dict[str, object] = {
        "id": member.id,
        "name": member.name,
        "email": member.email,
        "phone": member.phone,
        "address": member.address,
        "role": member.role,
        "department": member.department,
        "join_date": _iso(member.join_date),
        "salary": round(member.salary, 2),
        "total_paid": round(member.total_paid, 2),
        "pending_salary": round(max(member.salary - member.total_paid, 0.0), 2),
        "payment_mode": member.payment_mode,
        "status": member.status,
        "has_photo": bool(member.photo),
        "documents": [
            {key: value for key, value in document.items() if key != "data"} for document in documents
        ],
        "deleted_at": _iso(member.deleted_at),
        "deleted_by": member.deleted_by,
        "created_at": _iso(member.created_at),
    }
    if include_files:
        data["photo"] = member.photo
        data["documents"] = documents
    return data


__all__ = [
    "serialize_category",
    "serialize_product",
    "serialize_role",
    "serialize_settlement",
    "serialize_staff",
    "serialize_stock_entry",
    "serialize_supplier",
]
