from __future__ import annotations

from dataclasses import dataclass, field, replace

import pytest
import requests
import responses

from taskmate_client.exceptions import (
    ForbiddenError,
    RateLimitError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from taskmate_client.http_client import HttpClient, is_session_critical

from tests.session_helpers import BASE_URL


@dataclass
class FakeCredentials:
    token: str | None = "token-1"
    failures: list[str] = field(default_factory=list)

    def get_token(self) -> str | None:
        return self.token

    def on_auth_failure(self, reason: str) -> None:
        self.failures.append(reason)
        self.token = None


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/session", True),
        ("/session/current", True),
        ("session/current?x=1", True),
        ("", True),
        ("/", True),
        ("/tasks", False),
        ("/sessions-report", False),
        ("/dealerships/5", False),
    ],
)
def test_is_session_critical(path: str, expected: bool) -> None:
    assert is_session_critical(path) is expected


@responses.activate
def test_bearer_token_attached_when_present(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={"data": []}, status=200)
    http = HttpClient(config, credentials=FakeCredentials(token="abc"))

    assert http.request("GET", "/tasks") == {"data": []}
    assert responses.calls[0].request.headers["Authorization"] == "Bearer abc"
    assert responses.calls[0].request.headers["Accept"] == "application/json"


@responses.activate
def test_no_authorization_header_without_token(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={"data": []}, status=200)
    http = HttpClient(config, credentials=FakeCredentials(token=None))

    http.request("GET", "/tasks")

    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_token_is_read_per_request(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={}, status=200)
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={}, status=200)
    credentials = FakeCredentials(token="first")
    http = HttpClient(config, credentials=credentials)

    http.request("GET", "/tasks")
    credentials.token = "second"
    http.request("GET", "/tasks")

    assert responses.calls[1].request.headers["Authorization"] == "Bearer second"


@responses.activate
def test_401_on_session_endpoint_signals_auth_failure(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/session/current", json={"message": "Unauthenticated."}, status=401)
    credentials = FakeCredentials()
    http = HttpClient(config, credentials=credentials)

    with pytest.raises(UnauthorizedError) as exc_info:
        http.request("GET", "/session/current")

    assert exc_info.value.message == "Unauthenticated."
    assert credentials.failures == ["unauthenticated"]


@responses.activate
def test_401_on_other_endpoint_keeps_session(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={"message": "Unauthenticated."}, status=401)
    credentials = FakeCredentials()
    http = HttpClient(config, credentials=credentials)

    with pytest.raises(UnauthorizedError):
        http.request("GET", "/tasks")

    assert credentials.failures == []
    assert credentials.token == "token-1"


@responses.activate
def test_403_is_logged_and_never_clears_session(config, caplog: pytest.LogCaptureFixture) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/session/current",
        json={"message": "Forbidden", "required_roles": ["owner"]},
        status=403,
    )
    credentials = FakeCredentials()
    http = HttpClient(config, credentials=credentials)

    with caplog.at_level("ERROR", logger="taskmate_client.http_client"):
        with pytest.raises(ForbiddenError):
            http.request("GET", "/session/current")

    assert credentials.failures == []
    assert any(record.getMessage() == "insufficient_privilege" for record in caplog.records)


@responses.activate
def test_validation_errors_carry_field_errors(config) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/tasks",
        json={"message": "Invalid", "errors": {"title": ["required"]}, "error_type": "validation_error"},
        status=422,
    )
    http = HttpClient(config, credentials=FakeCredentials())

    with pytest.raises(ValidationError) as exc_info:
        http.request("POST", "/tasks", json_body={})

    assert exc_info.value.code == "validation_error"
    assert exc_info.value.details == {"title": ["required"]}


@responses.activate
def test_rate_limit_keeps_retry_after(config) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/tasks",
        json={"message": "Too Many Attempts."},
        status=429,
        headers={"Retry-After": "12"},
    )
    http = HttpClient(config, credentials=FakeCredentials())

    with pytest.raises(RateLimitError) as exc_info:
        http.request("GET", "/tasks")

    assert exc_info.value.details == {"retry_after": "12"}


@responses.activate
def test_timeout_raises_transport_error(config) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tasks", body=requests.exceptions.ReadTimeout("slow"))
    http = HttpClient(config, credentials=FakeCredentials())

    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/tasks")

    assert exc_info.value.code == "TIMEOUT"
    assert exc_info.value.status_code == 0


@responses.activate
def test_get_retries_server_errors(config) -> None:
    retrying = HttpClient(replace(config, retries=1), credentials=FakeCredentials())
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={"message": "boom"}, status=503)
    responses.add(responses.GET, f"{BASE_URL}/tasks", json={"data": [1]}, status=200)

    assert retrying.request("GET", "/tasks") == {"data": [1]}
    assert len(responses.calls) == 2


@responses.activate
def test_mutations_are_not_retried(config) -> None:
    retrying = HttpClient(replace(config, retries=2), credentials=FakeCredentials())
    responses.add(responses.DELETE, f"{BASE_URL}/session", body=requests.exceptions.ConnectionError("down"))

    with pytest.raises(TransportError):
        retrying.request("DELETE", "/session")

    assert len(responses.calls) == 1


@responses.activate
def test_empty_body_returns_none(config) -> None:
    responses.add(responses.DELETE, f"{BASE_URL}/session", status=204)
    http = HttpClient(config, credentials=FakeCredentials())

    assert http.request("DELETE", "/session") is None
