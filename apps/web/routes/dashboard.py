"""HTML console screens."""
from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse

from ..dashboard import get_screen, render_index, render_screen
from .context import RouteContext


def register_dashboard_routes(app: FastAPI, ctx: RouteContext) -> None:
    @app.get("/dashboard", response_class=HTMLResponse)
    def dashboard_index() -> HTMLResponse:
        return HTMLResponse(content=render_index())

    @app.get("/dashboard/{slug}", response_class=HTMLResponse)
    def dashboard_screen(slug: str) -> HTMLResponse:
        screen = get_screen(slug)
        if screen is None:
            ctx.logger.info("Unknown dashboard screen requested: %s", slug)
            raise HTTPException(404, {"error": "not_found", "detail": f"screen {slug} not found"})
        return HTMLResponse(content=render_screen(screen))


__all__ = ["register_dashboard_routes"]
