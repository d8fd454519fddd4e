from __future__ import annotations

from pathlib import Path

import pytest

from taskmate_client.config import DEFAULT_API_BASE_URL, ClientConfig, ConfigError, load_config


def test_defaults_without_environment() -> None:
    cfg = ClientConfig.from_env({})

    assert cfg.api_base_url == DEFAULT_API_BASE_URL
    assert cfg.timeout_seconds == 30.0
    assert cfg.retries == 1
    assert cfg.verify_ssl is True
    assert cfg.app_name == "taskmate"


def test_request_timeout_caps_connect_phase() -> None:
    assert ClientConfig(timeout_seconds=30.0).request_timeout == (5.0, 30.0)
    assert ClientConfig(timeout_seconds=2.0).request_timeout == (2.0, 2.0)


def test_base_url_trailing_slash_is_dropped() -> None:
    cfg = ClientConfig.from_env({"TASKMATE_API_BASE_URL": "https://taskmate.example.com/api/v1/"})

    assert cfg.api_base_url == "https://taskmate.example.com/api/v1"


def test_blank_values_fall_back_to_defaults() -> None:
    cfg = ClientConfig.from_env({"TASKMATE_TIMEOUT_SECONDS": "  ", "TASKMATE_APP_NAME": ""})

    assert cfg.timeout_seconds == 30.0
    assert cfg.app_name == "taskmate"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("TASKMATE_TIMEOUT_SECONDS", "0"),
        ("TASKMATE_TIMEOUT_SECONDS", "abc"),
        ("TASKMATE_RETRIES", "-1"),
        ("TASKMATE_RETRIES", "1.5"),
        ("TASKMATE_RETRY_BACKOFF_SECONDS", "-0.1"),
    ],
)
def test_invalid_values_name_the_variable(key: str, value: str) -> None:
    with pytest.raises(ConfigError, match=key):
        ClientConfig.from_env({key: value})


def test_zero_retries_allowed() -> None:
    assert ClientConfig.from_env({"TASKMATE_RETRIES": "0"}).retries == 0


@pytest.mark.parametrize("value", ["false", "0", "off", "NO"])
def test_verify_ssl_can_be_disabled(value: str) -> None:
    assert ClientConfig.from_env({"TASKMATE_VERIFY_SSL": value}).verify_ssl is False


def test_load_config_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKMATE_TIMEOUT_SECONDS", "12.5")

    assert load_config().timeout_seconds == 12.5


def test_load_config_reads_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("TASKMATE_API_BASE_URL=https://dotenv.example.com/api/v1\n", encoding="utf-8")
    monkeypatch.setenv("TASKMATE_RETRIES", "3")

    cfg = load_config(str(env_file))

    assert cfg.api_base_url == "https://dotenv.example.com/api/v1"
    assert cfg.retries == 3
