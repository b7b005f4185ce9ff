"""Categories, suppliers and products for the three inventory domains."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from packages.db import DOMAINS, Category, Product, Supplier
from services.ledger.aggregates import (
    PAYMENT_TYPES,
    low_stock_threshold,
    recompute_account,
    recompute_stock,
)

from .errors import RecordConflict, RecordNotFound
from .fields import (
    coerce_count,
    coerce_date,
    coerce_number,
    coerce_positive,
    normalize_status,
    optional_text,
    require_text,
)

LOGGER = logging.getLogger("carestore.catalog")

CODE_PREFIXES: Mapping[str, str] = {"general": "GP", "grocery": "GR", "medicine": "MD"}
CODE_WIDTH = 4
_CODE_RE = re.compile(r"^[A-Z]+(?P<number>\d+)$")

_PRODUCT_TEXT_FIELDS = ("description", "unit", "manufacturer", "batch_number")


def validate_domain(domain: str) -> str:
    value = (domain or "").strip().lower()
    if value not in DOMAINS:
        raise RecordNotFound("domain", domain)
    return value


def code_number(code: str | None) -> int:
    """Return the numeric part of a generated code, or 0 when absent."""

    match = _CODE_RE.match((code or "").strip().upper())
    return int(match.group("number")) if match else 0


def next_product_code(session: Session, domain: str) -> str:
    prefix = CODE_PREFIXES[validate_domain(domain)]
    codes = session.execute(select(Product.code).where(Product.domain == domain)).scalars()
    highest = max((code_number(code) for code in codes if code.startswith(prefix)), default=0)
    return f"{prefix}{highest + 1:0{CODE_WIDTH}d}"


class CatalogService:
    """CRUD for categories, suppliers and products scoped by domain."""

    def __init__(self, session: Session, *, thresholds: Mapping[str, int] | None = None) -> None:
        self.session = session
        self.thresholds = thresholds

    # Categories -----------------------------------------------------------------

    def list_categories(self, domain: str) -> List[Category]:
        domain = validate_domain(domain)
        stmt = select(Category).where(Category.domain == domain).order_by(Category.id.desc())
        return list(self.session.execute(stmt).scalars())

    def create_category(self, domain: str, data: Mapping[str, object]) -> Category:
        domain = validate_domain(domain)
        name = require_text(data, "name", "Category name")
        self._ensure_unique_category(domain, name)
        category = Category(
            domain=domain,
            name=name,
            description=optional_text(data, "description"),
            status=normalize_status(data.get("status")),
        )
        self.session.add(category)
        self.session.flush()
        LOGGER.info("Created %s category %s", domain, name)
        return category

    def update_category(self, domain: str, category_id: int, data: Mapping[str, object]) -> Category:
        category = self._category(domain, category_id)
        if "name" in data:
            name = require_text(data, "name", "Category name")
            if name.lower() != category.name.lower():
                self._ensure_unique_category(category.domain, name)
            category.name = name
        if "description" in data:
            category.description = optional_text(data, "description")
        if "status" in data:
            category.status = normalize_status(data.get("status"))
        self.session.flush()
        return category

    def delete_category(self, domain: str, category_id: int) -> None:
        category = self._category(domain, category_id)
        self.session.delete(category)
        self.session.flush()
        LOGGER.info("Deleted %s category %s", category.domain, category.name)

    # Suppliers ------------------------------------------------------------------

    def list_suppliers(self, domain: str) -> List[Supplier]:
        domain = validate_domain(domain)
        stmt = select(Supplier).where(Supplier.domain == domain).order_by(Supplier.id.desc())
        return list(self.session.execute(stmt).scalars())

    def create_supplier(self, domain: str, data: Mapping[str, object]) -> Supplier:
        domain = validate_domain(domain)
        supplier = Supplier(
            domain=domain,
            name=require_text(data, "name", "Supplier name"),
            contact_person=require_text(data, "contact_person", "Contact person"),
            email=_normalize_email(require_text(data, "email", "Email")),
            phone=require_text(data, "phone", "Phone"),
            address=optional_text(data, "address"),
            status=normalize_status(data.get("status")),
        )
        self.session.add(supplier)
        self.session.flush()
        LOGGER.info("Created %s supplier %s", domain, supplier.name)
        return supplier

    def update_supplier(self, domain: str, supplier_id: int, data: Mapping[str, object]) -> Supplier:
        supplier = self._supplier(domain, supplier_id)
        for key, label in (("name", "Supplier name"), ("contact_person", "Contact person"), ("phone", "Phone")):
            if key in data:
                setattr(supplier, key, require_text(data, key, label))
        if "email" in data:
            supplier.email = _normalize_email(require_text(data, "email", "Email"))
        if "address" in data:
            supplier.address = optional_text(data, "address")
        if "status" in data:
            supplier.status = normalize_status(data.get("status"))
        self.session.flush()
        return supplier

    def delete_supplier(self, domain: str, supplier_id: int) -> None:
        supplier = self._supplier(domain, supplier_id)
        self.session.delete(supplier)
        self.session.flush()
        LOGGER.info("Deleted %s supplier %s", supplier.domain, supplier.name)

    # Products -------------------------------------------------------------------

    def list_products(self, domain: str) -> List[Product]:
        domain = validate_domain(domain)
        stmt = select(Product).where(Product.domain == domain).order_by(Product.id.asc())
        return list(self.session.execute(stmt).scalars())

    def get_product(self, domain: str, product_id: int) -> Product:
        domain = validate_domain(domain)
        product = self.session.get(Product, product_id)
        if product is None or product.domain != domain:
            raise RecordNotFound("product", product_id)
        return product

    def create_product(self, domain: str, data: Mapping[str, object]) -> Product:
        domain = validate_domain(domain)
        name = require_text(data, "name", "Product name")
        category = require_text(data, "category", "Category")
        supplier = require_text(data, "supplier", "Supplier")
        price = round(coerce_positive(data.get("price"), field="Price"), 2)
        quantity = coerce_count(data.get("quantity"), field="Quantity", positive=True)
        purchase_amount = _purchase_amount(data, price, quantity)
        purchase_date = coerce_date(data.get("purchase_date"), field="Purchase date") or date.today()
        expiry_date = coerce_date(data.get("expiry_date"), field="Expiry date")
        if expiry_date is not None and expiry_date < purchase_date:
            raise ValueError("Expiry date cannot be before the purchase date")

        product = Product(
            domain=domain,
            code=next_product_code(self.session, domain),
            name=name,
            category=category,
            supplier=supplier,
            price=price,
            quantity=quantity,
            status=normalize_status(data.get("status")),
            purchase_date=purchase_date,
            expiry_date=expiry_date,
            purchase_amount=purchase_amount,
            payment_type=_payment_type(data.get("payment_type")),
            last_update=purchase_date,
        )
        for key in _PRODUCT_TEXT_FIELDS:
            setattr(product, key, optional_text(data, key))
        self.session.add(product)
        self.session.flush()
        recompute_stock(self.session, product, low_stock_threshold(domain, self.thresholds))
        recompute_account(self.session, product)
        self.session.flush()
        LOGGER.info("Created %s product %s (%s)", domain, product.code, product.name)
        return product

    def update_product(self, domain: str, product_id: int, data: Mapping[str, object]) -> Product:
        """Apply a partial update; aggregate columns are always recomputed."""

        product = self.get_product(domain, product_id)
        for key, label in (("name", "Product name"), ("category", "Category"), ("supplier", "Supplier")):
            if key in data:
                setattr(product, key, require_text(data, key, label))
        for key in _PRODUCT_TEXT_FIELDS:
            if key in data:
                setattr(product, key, optional_text(data, key))
        if "status" in data:
            product.status = normalize_status(data.get("status"))
        if "payment_type" in data:
            product.payment_type = _payment_type(data.get("payment_type"))
        if "purchase_date" in data:
            product.purchase_date = coerce_date(data.get("purchase_date"), field="Purchase date") or product.purchase_date
        if "expiry_date" in data:
            product.expiry_date = coerce_date(data.get("expiry_date"), field="Expiry date")
        if product.expiry_date is not None and product.expiry_date < product.purchase_date:
            raise ValueError("Expiry date cannot be before the purchase date")

        pricing_changed = False
        if "price" in data:
            product.price = round(coerce_positive(data.get("price"), field="Price"), 2)
            pricing_changed = True
        if "quantity" in data:
            product.quantity = coerce_count(data.get("quantity"), field="Quantity", positive=True)
            pricing_changed = True
        if "purchase_amount" in data or pricing_changed:
            product.purchase_amount = _purchase_amount(data, product.price, product.quantity)
            if round(product.purchase_amount - product.settlement_amount, 2) < 0:
                raise RecordConflict(
                    f"Purchase amount cannot be less than the settled amount ({product.settlement_amount:.2f})"
                )

        recompute_stock(self.session, product, low_stock_threshold(product.domain, self.thresholds))
        recompute_account(self.session, product)
        product.last_update = date.today()
        self.session.flush()
        return product

    def delete_product(self, domain: str, product_id: int) -> None:
        product = self.get_product(domain, product_id)
        self.session.delete(product)
        self.session.flush()
        LOGGER.info("Deleted %s product %s", product.domain, product.code)

    # Helpers --------------------------------------------------------------------

    def _category(self, domain: str, category_id: int) -> Category:
        domain = validate_domain(domain)
        category = self.session.get(Category, category_id)
        if category is None or category.domain != domain:
            raise RecordNotFound("category", category_id)
        return category

    def _supplier(self, domain: str, supplier_id: int) -> Supplier:
        domain = validate_domain(domain)
        supplier = self.session.get(Supplier, supplier_id)
        if supplier is None or supplier.domain != domain:
            raise RecordNotFound("supplier", supplier_id)
        return supplier

    def _ensure_unique_category(self, domain: str, name: str) -> None:
        stmt = select(func.count(Category.id)).where(
            Category.domain == domain, func.lower(Category.name) == name.lower()
        )
        if self.session.execute(stmt).scalar_one():
            raise RecordConflict(f"Category {name!r} already exists")


def _purchase_amount(data: Mapping[str, object], price: float, quantity: int) -> float:
    raw = data.get("purchase_amount")
    if raw in (None, ""):
        return round(price * quantity, 2)
    return round(coerce_number(raw, field="Purchase amount", minimum=0), 2)


def _payment_type(value: object) -> Optional[str]:
    if value in (None, ""):
        return None
    kind = str(value).strip().lower()
    if kind not in PAYMENT_TYPES:
        raise ValueError(f"Payment type must be one of: {', '.join(PAYMENT_TYPES)}")
    return kind


def _normalize_email(value: str) -> str:
    email = value.strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("Email must be a valid address")
    return email


__all__ = ["CODE_PREFIXES", "CatalogService", "code_number", "next_product_code", "validate_domain"]
