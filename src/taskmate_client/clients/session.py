from __future__ import annotations

from ..models import LoginRequest, LoginResponse, User
from .base import BaseClient


class SessionApi(BaseClient):
    """``/session`` endpoints: login, logout and the current identity."""

    def login(self, login: str, password: str) -> LoginResponse:
        payload = LoginRequest(login=login, password=password).model_dump()
        data = self._request("POST", "/session", json_body=payload)
        return LoginResponse.model_validate(data)

    def logout(self) -> None:
        self._request("DELETE", "/session")

    def current_user(self) -> User:
        data = self._request("GET", "/session/current")
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return User.model_validate(data)
