"""
Role policy and department scoping.

``POLICY`` is the single table deciding which roles may perform an action on
a resource; routes consult it through ``require_permission``. Row-level
visibility is expressed as a ``Scope`` and applied to list queries by
``apply_scope``, and to single records by ``can_access_record``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from fastapi import HTTPException, status


class Role(str, enum.Enum):
    admin = "admin"
    supervisor = "supervisor"
    officer = "officer"


class Resource(str, enum.Enum):
    officers = "officers"
    duty_assignments = "duty_assignments"
    attendance = "attendance"
    absence_requests = "absence_requests"
    clock_settings = "clock_settings"
    dashboard = "dashboard"
    supervisor_dashboard = "supervisor_dashboard"
    notifications = "notifications"


class Action(str, enum.Enum):
    list = "list"
    read = "read"
    create = "create"
    update = "update"
    delete = "delete"
    list_own = "list_own"
    check_in = "check_in"
    check_out = "check_out"
    decide = "decide"
    history = "history"


ALL_ROLES = frozenset(Role)
STAFF = frozenset({Role.admin, Role.supervisor})
ADMIN_ONLY = frozenset({Role.admin})
OFFICER_ONLY = frozenset({Role.officer})

POLICY: dict[tuple[Resource, Action], frozenset[Role]] = {
    (Resource.officers, Action.list): ALL_ROLES,
    (Resource.officers, Action.read): ALL_ROLES,
    (Resource.officers, Action.create): STAFF,
    (Resource.officers, Action.update): STAFF,
    (Resource.officers, Action.delete): STAFF,

    (Resource.duty_assignments, Action.list): ALL_ROLES,
    (Resource.duty_assignments, Action.list_own): OFFICER_ONLY,
    (Resource.duty_assignments, Action.read): ALL_ROLES,
    (Resource.duty_assignments, Action.create): STAFF,
    (Resource.duty_assignments, Action.update): STAFF,
    (Resource.duty_assignments, Action.delete): STAFF,

    (Resource.attendance, Action.check_in): OFFICER_ONLY,
    (Resource.attendance, Action.check_out): OFFICER_ONLY,
    (Resource.attendance, Action.list_own): OFFICER_ONLY,
    (Resource.attendance, Action.list): STAFF,
    (Resource.attendance, Action.read): ALL_ROLES,
    (Resource.attendance, Action.update): STAFF,
    (Resource.attendance, Action.delete): STAFF,

    (Resource.absence_requests, Action.create): OFFICER_ONLY,
    (Resource.absence_requests, Action.list_own): OFFICER_ONLY,
    (Resource.absence_requests, Action.list): STAFF,
    (Resource.absence_requests, Action.read): ALL_ROLES,
    (Resource.absence_requests, Action.decide): STAFF,
    (Resource.absence_requests, Action.delete): ALL_ROLES,

    (Resource.clock_settings, Action.read): ALL_ROLES,
    (Resource.clock_settings, Action.history): ADMIN_ONLY,
    (Resource.clock_settings, Action.create): ADMIN_ONLY,
    (Resource.clock_settings, Action.update): ADMIN_ONLY,
    (Resource.clock_settings, Action.delete): ADMIN_ONLY,

    (Resource.dashboard, Action.read): ADMIN_ONLY,
    (Resource.supervisor_dashboard, Action.read): frozenset({Role.supervisor}),

    (Resource.notifications, Action.list_own): ALL_ROLES,
    (Resource.notifications, Action.update): ALL_ROLES,
}


def is_allowed(role: Role | str, resource: Resource, action: Action) -> bool:
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in POLICY.get((resource, action), frozenset())


class ScopeKind(str, enum.Enum):
    all = "all"
    department = "department"
    self = "self"


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    department: str | None = None
    user_id: int | None = None


def scope_for(principal) -> Scope:
    """Visibility of ``principal``: everything, one department, or own rows."""
    role = Role(principal.role)
    if role is Role.admin:
        return Scope(ScopeKind.all)
    if role is Role.supervisor:
        if not principal.department:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Supervisor must have a department assigned",
            )
        return Scope(ScopeKind.department, department=principal.department)
    return Scope(ScopeKind.self, user_id=principal.id)


def can_access(principal, target_department: str | None) -> bool:
    role = Role(principal.role)
    if role is Role.admin:
        return True
    if role is Role.supervisor:
        return bool(principal.department) and target_department == principal.department
    return False


def can_access_record(principal, owner_id: int | None, department: str | None) -> bool:
    """Department check for staff, ownership check for officers."""
    if Role(principal.role) is Role.officer:
        return owner_id is not None and owner_id == principal.id
    return can_access(principal, department)


def apply_scope(query, scope: Scope, *, owner_column, department_column):
    if scope.kind is ScopeKind.department:
        return query.filter(department_column == scope.department)
    if scope.kind is ScopeKind.self:
        return query.filter(owner_column == scope.user_id)
    return query


def ensure_department_access(principal, target_department: str | None) -> None:
    if not can_access(principal, target_department):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this department",
        )
