from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin

import requests

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError

logger = logging.getLogger(__name__)

SESSION_ENDPOINT = "/session"


class CredentialProvider(Protocol):
    """What the HTTP client needs from whoever owns the session."""

    def get_token(self) -> str | None: ...

    def on_auth_failure(self, reason: str) -> None: ...


def normalize_path(path: str | None) -> str:
    if not path:
        return ""
    return "/" + path.strip().split("?", 1)[0].strip("/")


def is_session_critical(path: str | None) -> bool:
    """A 401 on these paths means the whole session is gone."""
    normalized = normalize_path(path)
    if normalized in {"", "/"}:
        return True
    return normalized == SESSION_ENDPOINT or normalized.startswith(f"{SESSION_ENDPOINT}/")


@dataclass
class HttpClient:
    config: ClientConfig
    credentials: CredentialProvider | None = None
    session: requests.Session | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def _auth_headers(self) -> dict[str, str]:
        token = self.credentials.get_token() if self.credentials else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json", "Content-Type": "application/json"}
        request_headers.update(self._auth_headers())
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        url = self._build_url(path)
        can_retry = normalized_method in {"GET", "HEAD"}
        attempts = self.config.retries + 1 if can_retry else 1

        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=self.config.request_timeout,
                    verify=self.config.verify_ssl,
                )
            except requests.Timeout as exc:
                if attempt >= attempts - 1:
                    raise TransportError(
                        code="TIMEOUT",
                        message="The server did not respond in time",
                        details={"type": type(exc).__name__},
                        status_code=0,
                    ) from exc
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        status_code=0,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        if response.ok:
            if not response.content:
                return None
            return response.json()

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        error = map_error(
            response.status_code,
            payload if isinstance(payload, dict) else {"details": payload},
            retry_after=response.headers.get("Retry-After"),
        )
        self._handle_rejection(response.status_code, path)
        raise error

    def _handle_rejection(self, status_code: int, path: str) -> None:
        if status_code == 401:
            if is_session_critical(path):
                logger.warning("session_rejected", extra={"path": normalize_path(path)})
                if self.credentials:
                    self.credentials.on_auth_failure("unauthenticated")
            else:
                logger.info("resource_unauthenticated", extra={"path": normalize_path(path)})
        elif status_code == 403:
            logger.error("insufficient_privilege", extra={"path": normalize_path(path)})
