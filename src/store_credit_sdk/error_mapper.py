from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ValidationError,
)

_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: PermissionError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    # Spring error bodies carry "error"/"message"/"path"; older endpoints send "code".
    payload = payload or {}
    code = str(payload.get("code") or payload.get("error") or "HTTP_ERROR")
    message = str(payload.get("message") or "Request failed")
    details = payload.get("details") if "details" in payload else payload.get("path")
    payload_trace_id = payload.get("trace_id") or payload.get("traceId")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    if status_code >= 500:
        mapped: type[ApiError] = ServerError
    else:
        mapped = _STATUS_ERRORS.get(status_code, ApiError)
    return mapped(
        code=code,
        message=message,
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )
