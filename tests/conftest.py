from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from taskmate_client.config import ClientConfig
from taskmate_client.models import DealershipRef, Role, User
from taskmate_client.storage import MemoryKeyValueStore

from tests.session_helpers import BASE_URL


@dataclass
class RecordingNavigator:
    routes: list[str] = field(default_factory=list)

    def navigate(self, route: str) -> None:
        self.routes.append(route)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "TASKMATE_API_BASE_URL",
        "TASKMATE_TIMEOUT_SECONDS",
        "TASKMATE_RETRIES",
        "TASKMATE_RETRY_BACKOFF_SECONDS",
        "TASKMATE_VERIFY_SSL",
        "TASKMATE_APP_NAME",
        "TASKMATE_TELEMETRY_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        api_base_url=BASE_URL,
        timeout_seconds=1.0,
        retries=0,
        retry_backoff_seconds=0.0,
    )


@pytest.fixture()
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture()
def make_user() -> Callable[..., User]:
    def _make_user(
        role: Role | str = Role.MANAGER,
        *,
        user_id: int = 1,
        dealership_id: int | None = None,
        dealership_ids: tuple[int, ...] = (),
    ) -> User:
        return User(
            id=user_id,
            login=f"user{user_id}",
            full_name=f"User {user_id}",
            role=Role(role),
            dealership_id=dealership_id,
            dealerships=[DealershipRef(id=item, name=f"Dealership {item}") for item in dealership_ids],
        )

    return _make_user
