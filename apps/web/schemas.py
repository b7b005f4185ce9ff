"""Request payloads accepted by the console API.

Every field is optional so the same model serves create and partial update;
routes pass ``model_dump(exclude_unset=True)`` to the services, which enforce
required fields. Aggregate columns (stock and settlement totals) are not
declared and are therefore dropped from incoming JSON.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CategoryPayload(_Payload):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class SupplierPayload(_Payload):
    name: Optional[str] = None
    contact_person: Optional[str] = Field(
        None, validation_alias=AliasChoices("contact_person", "contactPerson")
    )
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None


class ProductPayload(_Payload):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[float] = None
    purchase_amount: Optional[float] = None
    purchase_date: Optional[date] = None
    status: Optional[str] = None
    payment_type: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = Field(None, validation_alias=AliasChoices("batch_number", "batchNumber"))
    expiry_date: Optional[date] = Field(None, validation_alias=AliasChoices("expiry_date", "expiryDate"))


class StockMovementPayload(_Payload):
    stock_change: float
    stock_type: Optional[str] = "used"
    update_date: Optional[date] = None
    description: Optional[str] = None


class SettlementPayload(_Payload):
    amount: float
    payment_date: date
    payment_type: Optional[str] = "cash"
    description: Optional[str] = None


class RolePayload(_Payload):
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[List[str]] = None
    status: Optional[str] = None


class StaffDocument(_Payload):
    name: Optional[str] = None
    data: str


class StaffPayload(_Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    join_date: Optional[date] = Field(None, validation_alias=AliasChoices("join_date", "joinDate"))
    salary: Optional[float] = None
    total_paid: Optional[float] = Field(None, validation_alias=AliasChoices("total_paid", "totalPaid"))
    payment_mode: Optional[str] = Field(None, validation_alias=AliasChoices("payment_mode", "paymentMode"))
    status: Optional[str] = None
    photo: Optional[str] = None
    documents: Optional[List[Union[StaffDocument, str]]] = None


class SalaryPaymentPayload(_Payload):
    total_paid: float = Field(validation_alias=AliasChoices("total_paid", "totalPaid"))
    payment_mode: Optional[str] = Field(None, validation_alias=AliasChoices("payment_mode", "paymentMode"))


__all__ = [
    "CategoryPayload",
    "ProductPayload",
    "RolePayload",
    "SalaryPaymentPayload",
    "SettlementPayload",
    "StaffDocument",
    "StaffPayload",
    "StockMovementPayload",
    "SupplierPayload",
]
