from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from .models import DealershipRef, Role, User, WorkspaceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceSelection:
    selected_dealership_id: int | None = None
    has_initialized: bool = False

    def to_record(self) -> WorkspaceRecord:
        return WorkspaceRecord(
            selected_dealership_id=self.selected_dealership_id,
            has_initialized=self.has_initialized,
        )


@dataclass(frozen=True)
class WorkspaceView:
    """Read-only values derived for workspace switchers and data screens."""

    dealership_id: int | None
    available_dealerships: tuple[DealershipRef, ...]
    current_dealership: DealershipRef | None
    can_switch_workspace: bool
    can_select_all: bool
    is_all_dealerships: bool
    is_loading: bool


WorkspaceListener = Callable[[WorkspaceSelection, WorkspaceSelection], None]


def _contains(available: Sequence[DealershipRef], dealership_id: int | None) -> bool:
    return dealership_id is not None and any(item.id == dealership_id for item in available)


def _first_id(available: Sequence[DealershipRef]) -> int | None:
    return available[0].id if available else None


def available_dealerships_for(
    user: User | None,
    all_dealerships: Sequence[DealershipRef] | None = None,
) -> list[DealershipRef]:
    """Owners see every dealership; everyone else sees their assignments."""
    if user is None:
        return []
    if user.role == Role.OWNER:
        return list(all_dealerships or [])
    return list(user.dealerships)


class WorkspaceStore:
    def __init__(self) -> None:
        self._state = WorkspaceSelection()
        self._listeners: list[WorkspaceListener] = []

    @property
    def state(self) -> WorkspaceSelection:
        return self._state

    @property
    def selected_dealership_id(self) -> int | None:
        return self._state.selected_dealership_id

    @property
    def has_initialized(self) -> bool:
        return self._state.has_initialized

    def subscribe(self, listener: WorkspaceListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: object) -> None:
        previous = self._state
        current = replace(previous, **changes)
        if current == previous:
            return
        self._state = current
        for listener in list(self._listeners):
            listener(previous, current)

    def hydrate(self, record: WorkspaceRecord | None) -> None:
        if record is None:
            return
        self._set(
            selected_dealership_id=record.selected_dealership_id,
            has_initialized=record.has_initialized,
        )

    def set_dealership(self, dealership_id: int | None) -> None:
        self._set(selected_dealership_id=dealership_id)

    def initialize_workspace(self, user: User, available: Sequence[DealershipRef]) -> None:
        state = self._state
        if user.role == Role.EMPLOYEE:
            dealership_id = user.dealership_id
        elif state.has_initialized and _contains(available, state.selected_dealership_id):
            dealership_id = state.selected_dealership_id
        elif state.has_initialized and user.role == Role.OWNER and state.selected_dealership_id is None:
            # "All dealerships" chosen earlier
            dealership_id = None
        elif _contains(available, state.selected_dealership_id):
            dealership_id = state.selected_dealership_id
        else:
            dealership_id = _first_id(available)

        if dealership_id != state.selected_dealership_id:
            logger.info(
                "workspace_initialized",
                extra={"role": user.role.value, "previous": state.selected_dealership_id, "selected": dealership_id},
            )
        self._set(selected_dealership_id=dealership_id, has_initialized=True)

    def validate_and_update_workspace(self, user: User, available: Sequence[DealershipRef]) -> None:
        selected = self._state.selected_dealership_id
        if user.role == Role.EMPLOYEE:
            self._set(selected_dealership_id=user.dealership_id)
            return
        if user.role == Role.OWNER and selected is None:
            return
        if _contains(available, selected) or not available:
            return
        fallback = _first_id(available)
        logger.info("workspace_fallback", extra={"role": user.role.value, "previous": selected, "selected": fallback})
        self._set(selected_dealership_id=fallback)

    def resolve(self, user: User | None, available: Sequence[DealershipRef]) -> None:
        if user is None or not available:
            return
        if not self._state.has_initialized:
            self.initialize_workspace(user, available)
        else:
            self.validate_and_update_workspace(user, available)

    def reset_workspace(self) -> None:
        self._set(selected_dealership_id=None, has_initialized=False)

    def view(self, user: User | None, available: Sequence[DealershipRef]) -> WorkspaceView:
        selected = self._state.selected_dealership_id
        current = None
        if selected is not None:
            current = next((item for item in available if item.id == selected), None)
        if user is None or user.role == Role.EMPLOYEE:
            can_switch = False
        else:
            can_switch = user.role == Role.OWNER or len(available) > 1
        return WorkspaceView(
            dealership_id=selected,
            available_dealerships=tuple(available),
            current_dealership=current,
            can_switch_workspace=can_switch,
            can_select_all=user is not None and user.role == Role.OWNER,
            is_all_dealerships=selected is None,
            is_loading=user is not None and not self._state.has_initialized,
        )

    def filter_params(self) -> dict[str, int]:
        selected = self._state.selected_dealership_id
        return {"dealership_id": selected} if selected is not None else {}
