from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

TELEMETRY_CATEGORIES = {"auth", "navigation", "workspace"}
_FORBIDDEN_CONTEXT_KEYS = {
    "login",
    "password",
    "phone",
    "full_name",
    "token",
    "authorization",
}


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    name: str
    action: str
    timestamp_utc: str
    success: bool | None = None
    duration_ms: int | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        return {key: value for key, value in payload.items() if value is not None}


def _validate_context(context: dict[str, Any] | None) -> None:
    if not context:
        return
    illegal = sorted(key for key in context if key.lower() in _FORBIDDEN_CONTEXT_KEYS)
    if illegal:
        raise ValueError(f"PII-like keys are forbidden in telemetry context: {illegal}")


def build_event(
    *,
    category: str,
    name: str,
    action: str,
    success: bool | None = None,
    duration_ms: int | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    if category not in TELEMETRY_CATEGORIES:
        raise ValueError(f"Unsupported telemetry category: {category}")
    _validate_context(context)
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return TelemetryEvent(
        category=category,
        name=name,
        action=action,
        timestamp_utc=stamp,
        success=success,
        duration_ms=duration_ms,
        error_code=error_code,
        context=context,
    )


class TelemetryLogger:
    """Append-only JSONL sink for session lifecycle events."""

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool | None = None,
        log_file: str | Path | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = enabled if enabled is not None else _env_telemetry_enabled()
        self.log_file = Path(log_file) if log_file else Path("artifacts") / "telemetry" / f"{app_name}.jsonl"

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False

        payload = event.to_dict()
        payload["app_name"] = self.app_name
        line = json.dumps(payload, sort_keys=True)

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(f"{line}\n")
        except OSError:
            return False
        return True


def _env_telemetry_enabled() -> bool:
    value = os.getenv("TASKMATE_TELEMETRY_ENABLED", "0").strip().lower()
    return value in {"1", "true", "yes", "on"}
