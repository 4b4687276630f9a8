from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

MESSAGE_FIELDS = ("message", "error")


def extract_message(payload: object) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    for field in MESSAGE_FIELDS:
        value = payload.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def map_error(status_code: int, payload: object | None, trace_id: str | None) -> ApiError:
    code = "HTTP_ERROR"
    resolved_trace_id = trace_id
    if isinstance(payload, Mapping):
        code = str(payload.get("code") or code)
        payload_trace_id = payload.get("trace_id")
        if payload_trace_id is not None:
            resolved_trace_id = str(payload_trace_id)
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
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        status_code=status_code,
        code=code,
        message=extract_message(payload),
        payload=payload,
        trace_id=resolved_trace_id,
    )
