from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .auth_service import AuthService
from .models import Role
from .permissions import coerce_role, has_role
from .routes import DEFAULT_ROUTE, LOGIN_ROUTE, required_roles_for
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class GateOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    ACCESS_DENIED = "access_denied"
    RENDER = "render"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    redirect_to: str | None = None
    needs_refresh: bool = False
    required_roles: tuple[Role, ...] = ()
    user_role: Role | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GateOutcome.RENDER


class RouteGate:
    """Decides what a protected view may show for the current session."""

    def __init__(self, store: SessionStore, auth: AuthService | None = None) -> None:
        self.store = store
        self.auth = auth

    def evaluate(self, required_roles: Iterable[Role | str] | None = None) -> GateDecision:
        state = self.store.state
        if not state.has_hydrated or state.is_refreshing:
            return GateDecision(GateOutcome.LOADING)
        if state.needs_refresh:
            return GateDecision(GateOutcome.LOADING, needs_refresh=True)

        if not state.is_authenticated:
            self.store.debug.log("gate: not authenticated, redirecting", to=LOGIN_ROUTE)
            return GateDecision(GateOutcome.REDIRECT, redirect_to=LOGIN_ROUTE)

        if required_roles is not None:
            # Unknown role names grant nothing.
            roles = tuple(role for role in map(coerce_role, required_roles) if role is not None)
            if not has_role(state.user, roles):
                user_role = state.user.role if state.user else None
                logger.info(
                    "route_access_denied",
                    extra={"required_roles": [role.value for role in roles], "role": getattr(user_role, "value", None)},
                )
                return GateDecision(GateOutcome.ACCESS_DENIED, required_roles=roles, user_role=user_role)

        return GateDecision(GateOutcome.RENDER)

    def guard(self, required_roles: Iterable[Role | str] | None = None) -> GateDecision:
        """Evaluate, running the pending user refresh first if one is needed."""
        roles = tuple(required_roles) if required_roles is not None else None
        decision = self.evaluate(roles)
        if decision.needs_refresh and self.auth is not None:
            self.store.debug.log("gate: user data missing, refreshing")
            self.auth.refresh_user()
            decision = self.evaluate(roles)
        return decision

    def evaluate_path(self, path: str) -> GateDecision:
        return self.guard(required_roles_for(path))

    def evaluate_login_route(self) -> GateDecision:
        state = self.store.state
        if not state.has_hydrated:
            return GateDecision(GateOutcome.LOADING)
        if state.is_authenticated:
            return GateDecision(GateOutcome.REDIRECT, redirect_to=DEFAULT_ROUTE)
        return GateDecision(GateOutcome.RENDER)
