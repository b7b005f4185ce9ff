"""Staff registry with soft delete and salary tracking."""
from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from packages.db import StaffMember
from services.catalog.errors import RecordConflict, RecordNotFound
from services.catalog.fields import coerce_date, coerce_number, normalize_status, optional_text, require_text
from services.catalog.service import code_number
from services.ledger.aggregates import PAYMENT_TYPES

from .uploads import DOCUMENT_TYPES, IMAGE_TYPES, decode_data_url

LOGGER = logging.getLogger("carestore.staff")

STAFF_PREFIX = "STF"
STAFF_STATUSES: tuple[str, ...] = ("Active", "Inactive")


def next_staff_id(session: Session) -> str:
    """Return the next ``STF###`` id, counting soft-deleted rows too."""

    ids = session.execute(select(StaffMember.id)).scalars()
    highest = max((code_number(value) for value in ids), default=0)
    return f"{STAFF_PREFIX}{highest + 1:03d}"


def staff_documents(member: StaffMember) -> list[dict[str, object]]:
    try:
        documents = json.loads(member.documents_json or "[]")
    except json.JSONDecodeError:
        LOGGER.warning("Staff %s has unreadable documents; treating as empty", member.id)
        return []
    if not isinstance(documents, list):
        return []
    return [document for document in documents if isinstance(document, dict)]


class StaffService:
    """Create, update, soft-delete and restore staff; record salary payments."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> List[StaffMember]:
        stmt = select(StaffMember).where(StaffMember.deleted_at.is_(None))
        members = list(self.session.execute(stmt).scalars())
        members.sort(key=lambda member: code_number(member.id))
        return members

    def list_deleted(self) -> List[StaffMember]:
        stmt = (
            select(StaffMember)
            .where(StaffMember.deleted_at.is_not(None))
            .order_by(StaffMember.deleted_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def get(self, staff_id: str, *, include_deleted: bool = False) -> StaffMember:
        member = self.session.get(StaffMember, staff_id.strip().upper())
        if member is None or (member.deleted_at is not None and not include_deleted):
            raise RecordNotFound("staff", staff_id)
        return member

    def create(self, data: Mapping[str, object]) -> StaffMember:
        name = require_text(data, "name", "Name")
        email = _email(data)
        if email is not None:
            self._ensure_unique_email(email)
        salary = _money(data.get("salary"), "Salary")
        total_paid = _money(data.get("total_paid"), "Total paid")
        if total_paid > salary:
            raise ValueError("Total paid cannot exceed salary")
        member = StaffMember(
            id=next_staff_id(self.session),
            name=name,
            email=email,
            phone=optional_text(data, "phone"),
            address=optional_text(data, "address"),
            role=optional_text(data, "role"),
            department=optional_text(data, "department"),
            join_date=coerce_date(data.get("join_date"), field="Join date") or date.today(),
            salary=salary,
            total_paid=total_paid,
            payment_mode=_payment_mode(data.get("payment_mode")),
            status=normalize_status(data.get("status"), allowed=STAFF_STATUSES, default="Active"),
            photo=_photo(data.get("photo")),
            documents_json=json.dumps(_documents(data.get("documents"))),
        )
        self.session.add(member)
        self.session.flush()
        LOGGER.info("Created staff %s (%s)", member.id, member.name)
        return member

    def update(self, staff_id: str, data: Mapping[str, object]) -> StaffMember:
        member = self.get(staff_id)
        if "name" in data:
            member.name = require_text(data, "name", "Name")
        if "email" in data:
            email = _email(data)
            if email is not None and email != member.email:
                self._ensure_unique_email(email)
            member.email = email
        for key in ("phone", "address", "role", "department"):
            if key in data:
                setattr(member, key, optional_text(data, key))
        if "join_date" in data:
            member.join_date = coerce_date(data.get("join_date"), field="Join date")
        if "salary" in data:
            member.salary = _money(data.get("salary"), "Salary")
        if "total_paid" in data:
            member.total_paid = _money(data.get("total_paid"), "Total paid")
        if member.total_paid > member.salary:
            raise ValueError("Total paid cannot exceed salary")
        if "payment_mode" in data:
            member.payment_mode = _payment_mode(data.get("payment_mode"))
        if "status" in data:
            member.status = normalize_status(data.get("status"), allowed=STAFF_STATUSES, default="Active")
        if "photo" in data:
            member.photo = _photo(data.get("photo"))
        if "documents" in data:
            member.documents_json = json.dumps(_documents(data.get("documents")))
        self.session.flush()
        return member

    def soft_delete(self, staff_id: str, *, deleted_by: str | None = None) -> StaffMember:
        member = self.get(staff_id)
        member.deleted_at = datetime.now(timezone.utc)
        member.deleted_by = (deleted_by or "").strip() or "System"
        self.session.flush()
        LOGGER.info("Soft deleted staff %s by %s", member.id, member.deleted_by)
        return member

    def restore(self, staff_id: str) -> StaffMember:
        member = self.get(staff_id, include_deleted=True)
        if member.deleted_at is None:
            raise RecordConflict(f"Staff {member.id} is not deleted")
        member.deleted_at = None
        member.deleted_by = None
        self.session.flush()
        LOGGER.info("Restored staff %s", member.id)
        return member

    def salary_summary(self) -> dict[str, object]:
        """Totals over active, non-deleted staff."""

        members = [member for member in self.list() if member.status == "Active"]
        total_salary = round(sum(member.salary for member in members), 2)
        total_paid = round(sum(member.total_paid for member in members), 2)
        pending = round(sum(max(member.salary - member.total_paid, 0.0) for member in members), 2)
        return {
            "staff_count": len(members),
            "total_salary": total_salary,
            "total_paid": total_paid,
            "total_pending": pending,
            "fully_paid": sum(1 for member in members if member.total_paid >= member.salary),
        }

    def record_salary_payment(
        self,
        staff_id: str,
        *,
        total_paid: object,
        payment_mode: str | None = None,
    ) -> StaffMember:
        member = self.get(staff_id)
        paid = _money(total_paid, "Total paid")
        if paid > member.salary:
            raise ValueError(f"Total paid cannot exceed salary ({member.salary:.2f})")
        member.total_paid = paid
        if payment_mode is not None:
            member.payment_mode = _payment_mode(payment_mode)
        self.session.flush()
        LOGGER.info("Recorded salary payment for %s: %.2f of %.2f", member.id, paid, member.salary)
        return member

    def _ensure_unique_email(self, email: str) -> None:
        stmt = select(func.count(StaffMember.id)).where(func.lower(StaffMember.email) == email.lower())
        if self.session.execute(stmt).scalar_one():
            raise RecordConflict(f"Staff with email {email} already exists")


def _email(data: Mapping[str, object]) -> Optional[str]:
    email = optional_text(data, "email")
    if email is None:
        return None
    if "@" not in email:
        raise ValueError("Email must be a valid address")
    return email.lower()


def _money(value: object, field: str) -> float:
    if value in (None, ""):
        return 0.0
    return round(coerce_number(value, field=field, minimum=0), 2)


def _payment_mode(value: object) -> Optional[str]:
    if value in (None, ""):
        return None
    mode = str(value).strip().lower()
    if mode not in PAYMENT_TYPES:
        raise ValueError(f"Payment mode must be one of: {', '.join(PAYMENT_TYPES)}")
    return mode


def _photo(value: object) -> Optional[str]:
    if value in (None, ""):
        return None
    text = str(value).strip()
    decode_data_url(text, allowed=IMAGE_TYPES)
    return text


def _documents(value: object) -> list[dict[str, object]]:
    if value in (None, ""):
        return []
    if not isinstance(value, list):
        raise ValueError("Documents must be a list")
    documents: list[dict[str, object]] = []
    for index, item in enumerate(value, start=1):
        if isinstance(item, str):
            name, data_url = f"document-{index}", item
        elif isinstance(item, Mapping):
            name = str(item.get("name") or f"document-{index}")
            data_url = str(item.get("data") or "")
        else:
            raise ValueError("Each document must be a data URL or an object with name and data")
        decoded = decode_data_url(data_url, allowed=DOCUMENT_TYPES)
        documents.append(
            {"name": name, "mime_type": decoded.mime_type, "size": decoded.size, "data": data_url.strip()}
        )
    return documents


__all__ = ["STAFF_PREFIX", "STAFF_STATUSES", "StaffService", "next_staff_id", "staff_documents"]
