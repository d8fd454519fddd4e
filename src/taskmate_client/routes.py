from __future__ import annotations

from .models import Role

LOGIN_ROUTE = "/login"
DEFAULT_ROUTE = "/dashboard"

MANAGEMENT_ROLES: tuple[Role, ...] = (Role.MANAGER, Role.OWNER)

# Paths missing from this table only need an authenticated session.
ROUTE_ROLES: dict[str, tuple[Role, ...]] = {
    "/task-generators": MANAGEMENT_ROLES,
    "/archived-tasks": MANAGEMENT_ROLES,
    "/employees": (Role.MANAGER, Role.OWNER, Role.OBSERVER),
    "/dealerships": MANAGEMENT_ROLES,
    "/settings": MANAGEMENT_ROLES,
    "/reports": MANAGEMENT_ROLES,
    "/notification-settings": MANAGEMENT_ROLES,
}

ROUTE_ALIASES: dict[str, str] = {
    "/": DEFAULT_ROUTE,
    "/users": "/employees",
}


def normalize_route(path: str) -> str:
    cleaned = "/" + (path or "").split("?", 1)[0].split("#", 1)[0].strip("/")
    return ROUTE_ALIASES.get(cleaned, cleaned)


def required_roles_for(path: str) -> tuple[Role, ...] | None:
    return ROUTE_ROLES.get(normalize_route(path))
