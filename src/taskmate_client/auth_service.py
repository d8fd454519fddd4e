from __future__ import annotations

import logging
from time import perf_counter

from .clients.session import SessionApi
from .error_mapper import backend_message
from .exceptions import ApiError, AuthenticationError
from .models import User
from .session_store import SessionStore
from .telemetry import TelemetryLogger, build_event

logger = logging.getLogger(__name__)

GENERIC_LOGIN_ERROR = "Login failed"


class AuthService:
    """Session operations that talk to the backend.

    State lives in ``SessionStore``; this class only sequences HTTP calls
    around the store's transitions.
    """

    def __init__(
        self,
        store: SessionStore,
        api: SessionApi,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.store = store
        self.api = api
        self.telemetry = telemetry or TelemetryLogger(app_name="taskmate_client", enabled=False)

    def login(self, login: str, password: str) -> User:
        started = perf_counter()
        self.store.begin_login()
        logger.info("login_attempt")
        try:
            response = self.api.login(login, password)
        except ApiError as exc:
            message = backend_message(exc) or GENERIC_LOGIN_ERROR
            self.store.fail_login(message)
            logger.warning("login_failure", extra={"code": exc.code, "status_code": exc.status_code})
            self._emit_auth_result(False, started, error_code=exc.code)
            raise AuthenticationError(
                code=exc.code,
                message=message,
                details=exc.details,
                status_code=exc.status_code,
                raw_payload=exc.raw_payload,
            ) from exc
        except ValueError as exc:
            # Malformed success payload
            self.store.fail_login(GENERIC_LOGIN_ERROR)
            logger.exception("login_failure")
            self._emit_auth_result(False, started, error_code="INVALID_RESPONSE")
            raise AuthenticationError(
                code="INVALID_RESPONSE",
                message=GENERIC_LOGIN_ERROR,
                details=str(exc),
                status_code=0,
            ) from exc

        self.store.complete_login(response.user, response.token)
        logger.info("login_success", extra={"user_id": response.user.id, "role": response.user.role.value})
        self._emit_auth_result(True, started)
        return response.user

    def logout(self) -> None:
        logger.info("logout")
        try:
            if self.store.token:
                self.api.logout()
        except ApiError as exc:
            logger.warning("logout_remote_failure", extra={"code": exc.code, "status_code": exc.status_code})
        except Exception:
            # Unreadable success body or client misuse; the local session still ends.
            logger.exception("logout_remote_failure")
        finally:
            self.store.clear()

    def refresh_user(self) -> User | None:
        if not self.store.token:
            self.store.clear()
            self.store.debug.log("refresh skipped: no token")
            return None

        generation = self.store.begin_refresh()
        try:
            user = self.api.current_user()
        except (ApiError, ValueError) as exc:
            logger.warning("session_refresh_failure", extra={"error": str(exc)})
            self.store.fail_refresh(generation)
            return None

        if not self.store.complete_refresh(generation, user):
            return None
        return user

    def clear_error(self) -> None:
        self.store.clear_error()

    def _emit_auth_result(self, success: bool, started: float, *, error_code: str | None = None) -> None:
        self.telemetry.emit(
            build_event(
                category="auth",
                name="auth_login_result",
                action="login",
                success=success,
                duration_ms=int((perf_counter() - started) * 1000),
                error_code=error_code,
            )
        )
