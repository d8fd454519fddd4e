from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

_STATUS_CODES = {
    401: "UNAUTHENTICATED",
    403: "ACCESS_DENIED",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
}


def map_error(
    status_code: int,
    payload: Mapping[str, object] | None,
    retry_after: str | None = None,
) -> ApiError:
    payload = payload or {}
    # Laravel-style bodies: {"message": ..., "errors": {...}, "error_type": ...}
    code = str(payload.get("error_type") or payload.get("code") or _STATUS_CODES.get(status_code, "HTTP_ERROR"))
    message = str(payload.get("message") or "Request failed")
    details = payload.get("errors") or payload.get("details")
    mapped: type[ApiError]
    if status_code == 401:
        mapped = UnauthorizedError
    elif status_code == 403:
        mapped = ForbiddenError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
        if retry_after:
            details = {"retry_after": retry_after}
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def backend_message(error: ApiError) -> str | None:
    """Return the message the backend sent, or None if it sent none."""
    if isinstance(error.raw_payload, Mapping):
        message = error.raw_payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None
