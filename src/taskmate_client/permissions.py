from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import Role, User

_CAPABILITY_ROLES: dict[str, frozenset[Role]] = {
    "can_create_users": frozenset({Role.MANAGER, Role.OWNER}),
    "can_edit_users": frozenset({Role.MANAGER, Role.OWNER}),
    "can_delete_users": frozenset({Role.MANAGER, Role.OWNER}),
    "can_manage_tasks": frozenset({Role.MANAGER, Role.OWNER}),
    # Settings and dealership management are owner-only.
    "can_manage_settings": frozenset({Role.OWNER}),
    "can_manage_dealerships": frozenset({Role.OWNER}),
    "can_manage_dealership_settings": frozenset({Role.OWNER}),
    "can_manage_global_settings": frozenset({Role.OWNER}),
    # Employees open and close shifts through the bot, not the dashboard.
    "can_work_shifts": frozenset({Role.OWNER}),
}

ROLE_LABELS: dict[Role, str] = {
    Role.EMPLOYEE: "Employee",
    Role.OBSERVER: "Observer",
    Role.MANAGER: "Manager",
    Role.OWNER: "Owner",
}

ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.EMPLOYEE: "Bot access only",
    Role.OBSERVER: "Read-only",
    Role.MANAGER: "Manages dealerships",
    Role.OWNER: "Full access",
}


@dataclass(frozen=True)
class Permissions:
    can_create_users: bool = False
    can_edit_users: bool = False
    can_delete_users: bool = False
    can_manage_tasks: bool = False
    can_manage_settings: bool = False
    can_manage_dealerships: bool = False
    can_manage_dealership_settings: bool = False
    can_manage_global_settings: bool = False
    can_work_shifts: bool = False
    is_owner: bool = False
    is_manager: bool = False
    is_observer: bool = False
    is_employee: bool = False
    role: Role | None = None
    dealership_id: int | None = None

    def can_manage_dealership_settings_for(self, dealership_id: int) -> bool:
        return self.is_owner


def coerce_role(value: Role | str | None) -> Role | None:
    if value is None or isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return None


def resolve_permissions(user: User | None) -> Permissions:
    """Capability flags for ``user``; everything is False without one."""
    role = coerce_role(user.role) if user else None
    if role is None:
        return Permissions(dealership_id=user.dealership_id if user else None)
    flags = {name: role in roles for name, roles in _CAPABILITY_ROLES.items()}
    return Permissions(
        **flags,
        is_owner=role is Role.OWNER,
        is_manager=role is Role.MANAGER,
        is_observer=role is Role.OBSERVER,
        is_employee=role is Role.EMPLOYEE,
        role=role,
        dealership_id=user.dealership_id,
    )


def has_role(user: User | None, roles: Iterable[Role | str]) -> bool:
    if user is None:
        return False
    role = coerce_role(user.role)
    return role is not None and role in {coerce_role(item) for item in roles}


def role_label(role: Role | str) -> str:
    resolved = coerce_role(role)
    if resolved is None:
        return str(role)
    return ROLE_LABELS[resolved]


def role_description(role: Role | str) -> str:
    resolved = coerce_role(role)
    return ROLE_DESCRIPTIONS.get(resolved, "") if resolved else ""
