"""Route modules registered by :func:`apps.web.app.create_app`."""

from .access import register_access_routes
from .context import RouteContext
from .dashboard import register_dashboard_routes
from .inventory import register_inventory_routes
from .staff import register_staff_routes

__all__ = [
    "RouteContext",
    "register_access_routes",
    "register_dashboard_routes",
    "register_inventory_routes",
    "register_staff_routes",
]
