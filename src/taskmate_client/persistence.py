from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel

from .models import SessionRecord, WorkspaceRecord
from .session_store import SessionSnapshot, SessionStore
from .storage import KeyValueStore
from .workspace_store import WorkspaceSelection, WorkspaceStore

logger = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "auth-storage"
WORKSPACE_STORAGE_KEY = "workspace-storage"

RecordT = TypeVar("RecordT", bound=BaseModel)


class _Recordable(Protocol):
    def to_record(self) -> BaseModel: ...


@dataclass
class StorePersistence(Generic[RecordT]):
    """Explicit load/save of one record under one storage key."""

    storage: KeyValueStore
    key: str
    model: type[RecordT]

    def load(self) -> RecordT | None:
        try:
            raw = self.storage.get(self.key)
        except OSError:
            logger.warning("persistence_read_failed", extra={"key": self.key})
            return None
        if not raw:
            return None
        try:
            return self.model.model_validate(json.loads(raw))
        except ValueError:
            # Corrupt or outdated record: same as having none
            logger.warning("persistence_record_discarded", extra={"key": self.key})
            self.clear()
            return None

    def save(self, record: RecordT) -> bool:
        try:
            self.storage.set(self.key, json.dumps(record.model_dump(mode="json")))
        except OSError:
            logger.warning("persistence_write_failed", extra={"key": self.key})
            return False
        return True

    def clear(self) -> None:
        try:
            self.storage.remove(self.key)
        except OSError:
            logger.warning("persistence_clear_failed", extra={"key": self.key})

    def listener(self) -> Callable[[_Recordable, _Recordable], None]:
        def on_change(previous: _Recordable, current: _Recordable) -> None:
            record = current.to_record()
            if record != previous.to_record():
                self.save(record)

        return on_change


def session_persistence(storage: KeyValueStore) -> StorePersistence[SessionRecord]:
    return StorePersistence(storage=storage, key=SESSION_STORAGE_KEY, model=SessionRecord)


def workspace_persistence(storage: KeyValueStore) -> StorePersistence[WorkspaceRecord]:
    return StorePersistence(storage=storage, key=WORKSPACE_STORAGE_KEY, model=WorkspaceRecord)


def bind_session(store: SessionStore, persistence: StorePersistence[SessionRecord]) -> Callable[[], None]:
    """Hydrate ``store`` from storage, then save every persisted-field change."""
    store.hydrate(persistence.load())
    on_change: Callable[[SessionSnapshot, SessionSnapshot], None] = persistence.listener()
    return store.subscribe(on_change)


def bind_workspace(store: WorkspaceStore, persistence: StorePersistence[WorkspaceRecord]) -> Callable[[], None]:
    store.hydrate(persistence.load())
    on_change: Callable[[WorkspaceSelection, WorkspaceSelection], None] = persistence.listener()
    return store.subscribe(on_change)
