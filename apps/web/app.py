"""FastAPI application serving the CareStore console."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Callable, Iterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from packages.db import create_all, session_scope
from services.catalog.errors import RecordConflict, RecordNotFound

from .config import ConsoleConfig, load_config
from .routes import (
    RouteContext,
    register_access_routes,
    register_dashboard_routes,
    register_inventory_routes,
    register_staff_routes,
)
from .routes.context import SessionProvider

TodayProvider = Callable[[], date]


def create_app(
    *,
    db_path: Path | None = None,
    session_provider: SessionProvider | None = None,
    config: ConsoleConfig | None = None,
    logger: logging.Logger | None = None,
    today_provider: TodayProvider | None = None,
) -> FastAPI:
    """Construct the FastAPI application."""

    app_logger = logger or logging.getLogger("carestore.web")
    app_config = config or load_config()

    if session_provider is None:
        create_all(db_path)

        @contextmanager
        def _default_session() -> Iterator[Session]:
            with session_scope(db_path) as session:
                yield session

        session_provider = _default_session

    ctx = RouteContext(
        session=session_provider,
        config=app_config,
        logger=app_logger,
        today=today_provider or date.today,
    )

    app = FastAPI(title="CareStore Console API")

    @app.exception_handler(ValueError)
    def _handle_invalid(request: Request, exc: ValueError) -> JSONResponse:
        app_logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": "invalid", "detail": str(exc)}, status_code=400)

    @app.exception_handler(RecordNotFound)
    def _handle_missing(request: Request, exc: RecordNotFound) -> JSONResponse:
        return JSONResponse({"error": "not_found", "detail": str(exc)}, status_code=404)

    @app.exception_handler(RecordConflict)
    def _handle_conflict(request: Request, exc: RecordConflict) -> JSONResponse:
        app_logger.info("Conflict on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": "conflict", "detail": str(exc)}, status_code=409)

    @app.exception_handler(Exception)
    def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        app_logger.error("Unhandled application error", exc_info=exc)
        return JSONResponse(
            {"error": "internal", "detail": "see server logs"},
            status_code=500,
        )

    @app.get("/", response_class=JSONResponse)
    def index() -> dict[str, object]:
        return {
            "app": "CareStore console API",
            "status": "ok",
            "links": {
                "health": "/health",
                "dashboard": "/dashboard",
                "permissions": "/api/permissions",
                "roles": "/api/roles",
                "staff": "/api/staff",
                "salary_summary": "/api/staff/salary-summary",
                "general_products": "/api/general/products",
                "grocery_products": "/api/grocery/products",
                "medicine_products": "/api/medicine/products",
                "medicine_stock": "/api/medicine/stock",
                "medicine_accounts": "/api/medicine/accounts",
            },
            "docs": "See README.md for curl examples.",
        }

    @app.get("/health", response_class=JSONResponse)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    register_dashboard_routes(app, ctx)
    register_access_routes(app, ctx)
    register_staff_routes(app, ctx)
    register_inventory_routes(app, ctx)

    return app


__all__ = ["create_app"]
