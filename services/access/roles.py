"""Role definitions and permission checks."""
from __future__ import annotations

import json
import logging
from typing import List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from packages.db import Role, StaffMember
from services.catalog.errors import RecordConflict, RecordNotFound
from services.catalog.fields import normalize_status, optional_text, require_text

from .permissions import PAGE_IDS, is_admin_role, resolve_permissions

LOGGER = logging.getLogger("carestore.access")


def role_permissions(role: Role) -> List[str]:
    """Decode the stored permission list, tolerating legacy malformed rows."""

    if is_admin_role(role.name):
        return list(PAGE_IDS)
    try:
        stored = json.loads(role.permissions_json or "[]")
    except json.JSONDecodeError:
        LOGGER.warning("Role %s has unreadable permissions; treating as empty", role.id)
        return []
    if not isinstance(stored, list):
        return []
    return resolve_permissions(role.name, stored)


class RoleService:
    """Create, update and delete roles; answer permission checks."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> List[Role]:
        return list(self.session.execute(select(Role).order_by(Role.id.desc())).scalars())

    def get(self, role_id: int) -> Role:
        role = self.session.get(Role, role_id)
        if role is None:
            raise RecordNotFound("role", role_id)
        return role

    def find(self, name: str) -> Optional[Role]:
        stmt = select(Role).where(func.lower(Role.name) == name.strip().lower())
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, data: Mapping[str, object]) -> Role:
        name = require_text(data, "name", "Role name")
        if self.find(name) is not None:
            raise RecordConflict(f"Role {name!r} already exists")
        permissions = resolve_permissions(name, _requested(data))
        role = Role(
            name=name,
            description=optional_text(data, "description"),
            permissions_json=json.dumps(permissions),
            status=normalize_status(data.get("status")),
        )
        self.session.add(role)
        self.session.flush()
        LOGGER.info("Created role %s with %s permissions", name, len(permissions))
        return role

    def update(self, role_id: int, data: Mapping[str, object]) -> Role:
        role = self.get(role_id)
        previous_name = role.name
        if "name" in data:
            name = require_text(data, "name", "Role name")
            existing = self.find(name)
            if existing is not None and existing.id != role.id:
                raise RecordConflict(f"Role {name!r} already exists")
            role.name = name
        if "description" in data:
            role.description = optional_text(data, "description")
        if "status" in data:
            role.status = normalize_status(data.get("status"))
        if "permissions" in data or "name" in data:
            requested = _requested(data) if "permissions" in data else role_permissions(role)
            role.permissions_json = json.dumps(resolve_permissions(role.name, requested))
        if role.name != previous_name:
            self._rename_assignments(previous_name, role.name)
        self.session.flush()
        return role

    def delete(self, role_id: int) -> None:
        role = self.get(role_id)
        assigned = self.assigned_count(role.name)
        if assigned:
            raise RecordConflict(
                f"Cannot delete role {role.name!r}: {assigned} staff member(s) still assigned"
            )
        self.session.delete(role)
        self.session.flush()
        LOGGER.info("Deleted role %s", role.name)

    def assigned_count(self, role_name: str) -> int:
        stmt = select(func.count(StaffMember.id)).where(
            func.lower(StaffMember.role) == role_name.lower(),
            StaffMember.deleted_at.is_(None),
        )
        return int(self.session.execute(stmt).scalar_one())

    def permissions_for(self, role_name: str | None) -> List[str]:
        if not role_name:
            return []
        if is_admin_role(role_name):
            return list(PAGE_IDS)
        role = self.find(role_name)
        if role is None or role.status != "active":
            return []
        return role_permissions(role)

    def has_permission(self, role_name: str | None, page_id: str) -> bool:
        return page_id in self.permissions_for(role_name)

    def _rename_assignments(self, old: str, new: str) -> None:
        stmt = select(StaffMember).where(func.lower(StaffMember.role) == old.lower())
        for member in self.session.execute(stmt).scalars():
            member.role = new


def _requested(data: Mapping[str, object]) -> list[object]:
    value = data.get("permissions")
    if value is None:
        return []
    if isinstance(value, str):
        return list(value.split(","))
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError("Permissions must be a list of page ids")


__all__ = ["RoleService", "role_permissions"]
