"""Role-based access to console pages."""
from .permissions import PAGE_IDS, PAGES, Page, group_pages, is_admin_role, resolve_permissions
from .roles import RoleService, role_permissions

__all__ = [
    "PAGES",
    "PAGE_IDS",
    "Page",
    "RoleService",
    "group_pages",
    "is_admin_role",
    "resolve_permissions",
    "role_permissions",
]
