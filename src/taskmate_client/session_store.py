from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from .debug import AuthDebug
from .models import SessionRecord, User
from .routes import LOGIN_ROUTE

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def navigate(self, route: str) -> None: ...


@dataclass(frozen=True)
class SessionSnapshot:
    user: User | None = None
    token: str | None = None
    is_authenticated: bool = False
    has_hydrated: bool = False
    is_loading: bool = False
    is_refreshing: bool = False
    error: str | None = None

    @property
    def needs_refresh(self) -> bool:
        return bool(self.token) and self.is_authenticated and self.user is None

    def to_record(self) -> SessionRecord:
        return SessionRecord(token=self.token, user=self.user, is_authenticated=self.is_authenticated)


SessionListener = Callable[[SessionSnapshot, SessionSnapshot], None]


class SessionStore:
    """Single source of truth for who is logged in.

    State changes only through the transition methods below. Each transition
    replaces the snapshot in one step and then notifies subscribers with
    ``(previous, current)``. Persistence is one such subscriber.

    The store is also the ``CredentialProvider`` handed to ``HttpClient``.
    """

    def __init__(self, navigator: Navigator | None = None, debug: AuthDebug | None = None) -> None:
        self.navigator = navigator
        self.debug = debug or AuthDebug()
        self._state = SessionSnapshot()
        self._listeners: list[SessionListener] = []
        self._generation = 0

    @property
    def state(self) -> SessionSnapshot:
        return self._state

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def has_hydrated(self) -> bool:
        return self._state.has_hydrated

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_refreshing(self) -> bool:
        return self._state.is_refreshing

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: object) -> None:
        previous = self._state
        current = replace(previous, **changes)
        if current.is_authenticated and not current.token:
            current = replace(current, is_authenticated=False)
        if current == previous:
            return
        self._state = current
        for listener in list(self._listeners):
            listener(previous, current)

    # hydration

    def hydrate(self, record: SessionRecord | None) -> None:
        if self._state.has_hydrated:
            self.debug.warn("hydrate called twice; ignored")
            return
        record = record or SessionRecord()
        self._set(
            token=record.token,
            user=record.user,
            is_authenticated=bool(record.token) and record.is_authenticated,
            has_hydrated=True,
        )
        self.debug.log(
            "hydrated",
            has_token=bool(record.token),
            has_user=record.user is not None,
            is_authenticated=self._state.is_authenticated,
        )

    # credential provider

    def get_token(self) -> str | None:
        return self._state.token

    def on_auth_failure(self, reason: str) -> None:
        had_session = bool(self._state.token) or self._state.is_authenticated
        self._generation += 1
        self._set(user=None, token=None, is_authenticated=False, is_refreshing=False)
        if not had_session:
            return
        logger.warning("auth_failure_forced_logout", extra={"reason": reason})
        self.debug.log("forced logout", reason=reason)
        if self.navigator:
            self.navigator.navigate(LOGIN_ROUTE)

    # login

    def begin_login(self) -> int:
        self._generation += 1
        self._set(is_loading=True, error=None)
        return self._generation

    def complete_login(self, user: User, token: str) -> None:
        self._set(user=user, token=token, is_authenticated=True, is_loading=False, is_refreshing=False, error=None)
        self.debug.log("login complete", user_id=user.id, role=user.role.value)

    def fail_login(self, message: str) -> None:
        self._set(is_loading=False, error=message)

    # refresh

    def begin_refresh(self) -> int:
        self._generation += 1
        self._set(is_refreshing=True)
        return self._generation

    def complete_refresh(self, generation: int, user: User) -> bool:
        if generation != self._generation or not self._state.token:
            self.debug.log("stale refresh result discarded", generation=generation, current=self._generation)
            return False
        self._set(user=user, is_authenticated=True, is_refreshing=False)
        return True

    def fail_refresh(self, generation: int) -> bool:
        if generation != self._generation:
            self.debug.log("stale refresh failure discarded", generation=generation, current=self._generation)
            return False
        self._set(user=None, token=None, is_authenticated=False, is_refreshing=False)
        return True

    # logout / errors

    def clear(self) -> None:
        self._generation += 1
        self._set(user=None, token=None, is_authenticated=False, is_loading=False, is_refreshing=False)

    def clear_error(self) -> None:
        self._set(error=None)
