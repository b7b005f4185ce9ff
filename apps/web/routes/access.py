"""Role and permission endpoints."""
from __future__ import annotations

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse, Response

from services.access import PAGE_IDS, PAGES, RoleService, group_pages

from .. import export
from ..schemas import RolePayload
from ..serializers import serialize_role
from ..views import ListQuery
from .context import RouteContext

ROLE_SEARCH = ("name", "description")


def register_access_routes(app: FastAPI, ctx: RouteContext) -> None:
    """Attach role management and permission lookups to ``app``."""

    def _role_rows(query: ListQuery) -> tuple[list, list]:
        with ctx.session() as session:
            records = [serialize_role(role) for role in RoleService(session).list()]
        return records, ctx.filtered(records, query, search_fields=ROLE_SEARCH)

    @app.get("/api/permissions", response_class=JSONResponse)
    def permissions() -> dict[str, object]:
        return {
            "pages": [page.to_dict() for page in PAGES],
            "permissions": list(PAGE_IDS),
            "grouped": group_pages(),
        }

    @app.get("/api/roles/export.csv")
    def export_roles(
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _role_rows(query)
        text = export.render_csv(export.build_rows(rows, export.role_row), export.ROLE_HEADERS)
        return export.csv_response(text, filename=export.export_filename("roles", query.month, query.year))

    @app.get("/api/roles/check", response_class=JSONResponse)
    def check_permission(role: str = Query(...), page: str = Query(...)) -> dict[str, object]:
        with ctx.session() as session:
            allowed = RoleService(session).has_permission(role, page)
        return {"role": role, "page": page, "allowed": allowed}

    @app.get("/api/roles", response_class=JSONResponse)
    def list_roles(query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _role_rows(query)
        return ctx.list_response(records, rows, query)

    @app.get("/api/roles/{role_id}", response_class=JSONResponse)
    def get_role(role_id: int) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_role(RoleService(session).get(role_id))
        return data

    @app.post("/api/roles", status_code=201)
    def create_role(payload: RolePayload) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_role(RoleService(session).create(payload.model_dump(exclude_unset=True)))
        return data

    @app.put("/api/roles/{role_id}")
    def update_role(role_id: int, payload: RolePayload) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_role(RoleService(session).update(role_id, payload.model_dump(exclude_unset=True)))
        return data

    @app.delete("/api/roles/{role_id}")
    def delete_role(role_id: int) -> dict[str, object]:
        with ctx.session() as session:
            RoleService(session).delete(role_id)
        return {"status": "deleted", "id": role_id}


__all__ = ["register_access_routes"]
