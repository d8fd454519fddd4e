from __future__ import annotations

import logging
from collections.abc import Sequence

import requests

from .auth_service import AuthService
from .clients.dealerships import DealershipsApi
from .clients.session import SessionApi
from .config import ClientConfig, load_config
from .debug import AuthDebug
from .http_client import HttpClient
from .models import DealershipRef, Role
from .permissions import Permissions, resolve_permissions
from .persistence import bind_session, bind_workspace, session_persistence, workspace_persistence
from .route_gate import RouteGate
from .session_store import Navigator, SessionSnapshot, SessionStore
from .storage import FileKeyValueStore, KeyValueStore
from .telemetry import TelemetryLogger
from .workspace_store import WorkspaceStore, WorkspaceView, available_dealerships_for

logger = logging.getLogger(__name__)


class TaskMateApp:
    """Builds the session layer once and hands out the shared instances.

    Wiring order: stores first, then the HTTP client with the session store
    as its credential provider, then the API wrappers and services.
    Persistence hydrates each store before anything reads it.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        storage: KeyValueStore | None = None,
        navigator: Navigator | None = None,
        http_session: requests.Session | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.storage = storage or FileKeyValueStore(app_name=self.config.app_name)
        self.debug = AuthDebug(self.storage)

        self.session = SessionStore(navigator=navigator, debug=self.debug)
        self.workspace = WorkspaceStore()

        self.http = HttpClient(self.config, credentials=self.session, session=http_session)
        self.session_api = SessionApi(self.http)
        self.dealerships_api = DealershipsApi(self.http)

        self.auth = AuthService(self.session, self.session_api, telemetry=telemetry)
        self.gate = RouteGate(self.session, self.auth)

        self._unbind_workspace = bind_workspace(self.workspace, workspace_persistence(self.storage))
        self._unbind_session = bind_session(self.session, session_persistence(self.storage))
        self.session.subscribe(self._reset_workspace_on_identity_change)

    def permissions(self) -> Permissions:
        return resolve_permissions(self.session.user)

    def available_dealerships(self) -> list[DealershipRef]:
        user = self.session.user
        if user is None:
            return []
        if user.role == Role.OWNER:
            return available_dealerships_for(user, self.dealerships_api.list_all_dealerships())
        return available_dealerships_for(user)

    def resolve_workspace(self, available: Sequence[DealershipRef] | None = None) -> WorkspaceView:
        """Re-resolve the active dealership against what the user may see now."""
        dealerships = list(available) if available is not None else self.available_dealerships()
        self.workspace.resolve(self.session.user, dealerships)
        return self.workspace.view(self.session.user, dealerships)

    def close(self) -> None:
        self._unbind_session()
        self._unbind_workspace()
        if self.http.session is not None:
            self.http.session.close()

    def _reset_workspace_on_identity_change(self, previous: SessionSnapshot, current: SessionSnapshot) -> None:
        lost_session = previous.token is not None and current.token is None
        if previous.user is not None and current.user is not None:
            switched_user = previous.user.id != current.user.id
        else:
            # Restored token without a user: a new token means a new login.
            switched_user = (
                current.user is not None and previous.token is not None and current.token != previous.token
            )
        if lost_session or switched_user:
            logger.info("workspace_reset", extra={"reason": "logout" if lost_session else "user_switch"})
            self.workspace.reset_workspace()
