from __future__ import annotations

import base64
from datetime import date
from pathlib import Path

import pytest

from packages.db import create_all, session_scope
from services.catalog import RecordConflict, RecordNotFound
from services.staff import (
    MAX_UPLOAD_BYTES,
    StaffService,
    decode_data_url,
    encode_data_url,
    staff_documents,
)

PNG_URL = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode("ascii")
PDF_URL = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4 fake").decode("ascii")


def _db(tmp_path: Path) -> Path:
    db_path = tmp_path / "staff.db"
    create_all(db_path)
    return db_path


def test_decode_data_url_validates_type_and_size() -> None:
    decoded = decode_data_url(PDF_URL)
    assert decoded.mime_type == "application/pdf"
    assert decoded.size == len(b"%PDF-1.4 fake")

    with pytest.raises(ValueError, match="not allowed"):
        decode_data_url(PDF_URL, allowed=("image/png",))
    with pytest.raises(ValueError, match="data URL"):
        decode_data_url("https://example.com/a.png")
    with pytest.raises(ValueError, match="base64"):
        decode_data_url("data:image/png;base64,***")
    with pytest.raises(ValueError, match="5 MB"):
        encode_data_url(b"x" * (MAX_UPLOAD_BYTES + 1), "application/pdf")


def test_create_assigns_sequential_ids_and_defaults(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        first = staff.create({"name": "Asha", "email": "Asha@Clinic.Example", "salary": 3000})
        second = staff.create({"name": "Ben", "join_date": "2024-01-15", "status": "inactive"})

        assert (first.id, second.id) == ("STF001", "STF002")
        assert first.email == "asha@clinic.example"
        assert first.join_date == date.today()
        assert first.status == "Active"
        assert second.status == "Inactive"
        assert second.join_date == date(2024, 1, 15)


def test_email_must_be_unique_even_after_delete(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        member = staff.create({"name": "Asha", "email": "asha@clinic.example"})
        staff.soft_delete(member.id)
        with pytest.raises(RecordConflict):
            staff.create({"name": "Other Asha", "email": "ASHA@clinic.example"})


def test_total_paid_cannot_exceed_salary(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        with pytest.raises(ValueError, match="exceed"):
            staff.create({"name": "Asha", "salary": 100, "total_paid": 150})
        member = staff.create({"name": "Asha", "salary": 100})
        with pytest.raises(ValueError, match="exceed"):
            staff.record_salary_payment(member.id, total_paid=101)
        updated = staff.record_salary_payment(member.id, total_paid=60, payment_mode="Bank_Transfer")
        assert updated.total_paid == 60.0
        assert updated.payment_mode == "bank_transfer"


def test_soft_delete_and_restore(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        member = staff.create({"name": "Asha"})
        staff.create({"name": "Ben"})
        staff.soft_delete(member.id, deleted_by="manager")

        assert [item.id for item in staff.list()] == ["STF002"]
        assert [item.deleted_by for item in staff.list_deleted()] == ["manager"]
        with pytest.raises(RecordNotFound):
            staff.get("stf001")

        # ids keep counting past deleted rows
        assert staff.create({"name": "Cara"}).id == "STF003"

        restored = staff.restore("STF001")
        assert restored.deleted_at is None
        with pytest.raises(RecordConflict):
            staff.restore("STF001")


def test_photo_and_documents_are_validated(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        with pytest.raises(ValueError, match="not allowed"):
            staff.create({"name": "Asha", "photo": PDF_URL})
        member = staff.create(
            {"name": "Asha", "photo": PNG_URL, "documents": [{"name": "id.pdf", "data": PDF_URL}, PNG_URL]}
        )
        documents = staff_documents(member)
        assert [document["name"] for document in documents] == ["id.pdf", "document-2"]
        assert documents[0]["mime_type"] == "application/pdf"
        assert documents[1]["size"] == len(b"\x89PNG fake")


def test_salary_summary_counts_active_staff_only(tmp_path: Path) -> None:
    db_path = _db(tmp_path)
    with session_scope(db_path) as session:
        staff = StaffService(session)
        staff.create({"name": "Asha", "salary": 1000, "total_paid": 1000})
        staff.create({"name": "Ben", "salary": 800, "total_paid": 300})
        staff.create({"name": "Cara", "salary": 500, "status": "Inactive"})
        deleted = staff.create({"name": "Dev", "salary": 900})
        staff.soft_delete(deleted.id)

        assert staff.salary_summary() == {
            "staff_count": 2,
            "total_salary": 1800.0,
            "total_paid": 1300.0,
            "total_pending": 500.0,
            "fully_paid": 1,
        }
