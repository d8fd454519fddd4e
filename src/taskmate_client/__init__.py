from .app import TaskMateApp
from .auth_service import AuthService
from .clients import DealershipsApi, SessionApi
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import CredentialProvider, HttpClient, is_session_critical
from .models import Dealership, DealershipRef, Role, SessionRecord, User, WorkspaceRecord
from .permissions import Permissions, has_role, resolve_permissions, role_label
from .persistence import StorePersistence, session_persistence, workspace_persistence
from .route_gate import GateDecision, GateOutcome, RouteGate
from .routes import DEFAULT_ROUTE, LOGIN_ROUTE
from .session_store import Navigator, SessionSnapshot, SessionStore
from .storage import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .workspace_store import WorkspaceSelection, WorkspaceStore, WorkspaceView, available_dealerships_for

__all__ = [
    "ApiError",
    "AuthService",
    "AuthenticationError",
    "ClientConfig",
    "ConfigError",
    "CredentialProvider",
    "DEFAULT_ROUTE",
    "Dealership",
    "DealershipRef",
    "DealershipsApi",
    "FileKeyValueStore",
    "ForbiddenError",
    "GateDecision",
    "GateOutcome",
    "HttpClient",
    "KeyValueStore",
    "LOGIN_ROUTE",
    "MemoryKeyValueStore",
    "Navigator",
    "NotFoundError",
    "Permissions",
    "Role",
    "RouteGate",
    "SessionApi",
    "SessionRecord",
    "SessionSnapshot",
    "SessionStore",
    "StorePersistence",
    "TaskMateApp",
    "TransportError",
    "UnauthorizedError",
    "User",
    "ValidationError",
    "WorkspaceRecord",
    "WorkspaceSelection",
    "WorkspaceStore",
    "WorkspaceView",
    "available_dealerships_for",
    "has_role",
    "is_session_critical",
    "load_config",
    "resolve_permissions",
    "role_label",
    "session_persistence",
    "workspace_persistence",
]
