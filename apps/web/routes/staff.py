"""Staff registry endpoints."""
from __future__ import annotations

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse, Response

from services.access import RoleService
from services.staff import StaffService

from .. import export
from ..schemas import SalaryPaymentPayload, StaffPayload
from ..serializers import serialize_staff
from ..views import ListQuery
from .context import RouteContext

STAFF_SEARCH = ("id", "name", "email", "phone", "role", "department")


def register_staff_routes(app: FastAPI, ctx: RouteContext) -> None:
    """Attach staff CRUD, soft delete and salary endpoints to ``app``."""

    def _staff_rows(query: ListQuery) -> tuple[list, list]:
        with ctx.session() as session:
            records = [serialize_staff(member) for member in StaffService(session).list()]
        rows = ctx.filtered(records, query, search_fields=STAFF_SEARCH, date_field="join_date", code_field="id")
        return records, rows

    @app.get("/api/staff/export.csv")
    def export_staff(
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _staff_rows(query)
        text = export.render_csv(export.build_rows(rows, export.staff_row), export.STAFF_HEADERS)
        return export.csv_response(text, filename=export.export_filename("staff", query.month, query.year))

    @app.get("/api/staff/deleted", response_class=JSONResponse)
    def deleted_staff() -> dict[str, object]:
        with ctx.session() as session:
            items = [serialize_staff(member) for member in StaffService(session).list_deleted()]
        return {"items": items, "meta": {"count": len(items)}}

    @app.get("/api/staff/salary-summary", response_class=JSONResponse)
    def salary_summary() -> dict[str, object]:
        with ctx.session() as session:
            summary = StaffService(session).salary_summary()
        return {"summary": summary}

    @app.get("/api/staff", response_class=JSONResponse)
    def list_staff(query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _staff_rows(query)
        return ctx.list_response(records, rows, query)

    @app.post("/api/staff", status_code=201)
    def create_staff(payload: StaffPayload) -> dict[str, object]:
        with ctx.session() as session:
            member = StaffService(session).create(payload.model_dump(exclude_unset=True))
            data = serialize_staff(member)
        return data

    @app.get("/api/staff/{staff_id}", response_class=JSONResponse)
    def get_staff(staff_id: str) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_staff(StaffService(session).get(staff_id), include_files=True)
        return data

    @app.put("/api/staff/{staff_id}")
    def update_staff(staff_id: str, payload: StaffPayload) -> dict[str, object]:
        with ctx.session() as session:
            member = StaffService(session).update(staff_id, payload.model_dump(exclude_unset=True))
            data = serialize_staff(member)
        return data

    @app.delete("/api/staff/{staff_id}")
    def delete_staff(staff_id: str, deleted_by: str | None = Query(None)) -> dict[str, object]:
        with ctx.session() as session:
            member = StaffService(session).soft_delete(staff_id, deleted_by=deleted_by)
            data = serialize_staff(member)
        return {"status": "deleted", "item": data}

    @app.put("/api/staff/{staff_id}/restore")
    def restore_staff(staff_id: str) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_staff(StaffService(session).restore(staff_id))
        return {"status": "restored", "item": data}

    @app.put("/api/staff/{staff_id}/salary-payment")
    def salary_payment(staff_id: str, payload: SalaryPaymentPayload) -> dict[str, object]:
        with ctx.session() as session:
            member = StaffService(session).record_salary_payment(
                staff_id,
                total_paid=payload.total_paid,
                payment_mode=payload.payment_mode,
            )
            data = serialize_staff(member)
        return data

    @app.get("/api/staff/{staff_id}/permissions", response_class=JSONResponse)
    def staff_permissions(staff_id: str) -> dict[str, object]:
        with ctx.session() as session:
            member = StaffService(session).get(staff_id)
            permissions = RoleService(session).permissions_for(member.role)
            data = {"staff_id": member.id, "role": member.role, "permissions": permissions}
        return data


__all__ = ["register_staff_routes"]
