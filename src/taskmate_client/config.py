from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:8007/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0
# Connecting never gets more than this much of the overall deadline.
MAX_CONNECT_SECONDS = 5.0

_FALSE_VALUES = {"0", "false", "no", "off"}

N = TypeVar("N", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retries: int = 1
    retry_backoff_seconds: float = 0.3
    verify_ssl: bool = True
    app_name: str = "taskmate"

    @property
    def request_timeout(self) -> tuple[float, float]:
        """``(connect, read)`` pair handed to requests."""
        return min(self.timeout_seconds, MAX_CONNECT_SECONDS), self.timeout_seconds

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> ClientConfig:
        base_url = (env.get("TASKMATE_API_BASE_URL") or "").strip() or DEFAULT_API_BASE_URL
        return cls(
            api_base_url=base_url.rstrip("/"),
            timeout_seconds=_env_number(env, "TASKMATE_TIMEOUT_SECONDS", float, cls.timeout_seconds),
            retries=_env_number(env, "TASKMATE_RETRIES", int, cls.retries, allow_zero=True),
            retry_backoff_seconds=_env_number(
                env, "TASKMATE_RETRY_BACKOFF_SECONDS", float, cls.retry_backoff_seconds, allow_zero=True
            ),
            verify_ssl=(env.get("TASKMATE_VERIFY_SSL") or "true").strip().lower() not in _FALSE_VALUES,
            app_name=(env.get("TASKMATE_APP_NAME") or "").strip() or cls.app_name,
        )


def _env_number(
    env: Mapping[str, str],
    name: str,
    parse: Callable[[str], N],
    default: N,
    *,
    allow_zero: bool = False,
) -> N:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = parse(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise ConfigError(f"{name} must be {bound}, got {raw!r}")
    return value


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build the client config from the process environment.

    Values from ``env_file`` (or a ``.env`` found by python-dotenv) fill in
    variables that are not already set.
    """
    load_dotenv(env_file)
    return ClientConfig.from_env(os.environ)
