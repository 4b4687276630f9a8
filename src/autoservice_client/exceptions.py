from __future__ import annotations

from dataclasses import dataclass


class ClientError(Exception):
    """Base class for failures raised by the client layer."""


@dataclass
class ApiError(ClientError):
    status_code: int
    code: str = "HTTP_ERROR"
    message: str | None = None
    payload: object | None = None
    trace_id: str | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message or 'Request failed'}{trace}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400 / 422 responses. The shop answers 400 when stock is insufficient."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ClientError):
    """Network/transport failure before an HTTP response was returned."""

    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.trace_id = trace_id


class RequestCancelledError(TransportError):
    """The request was abandoned by the caller before a response was consumed."""


class ResponseDecodeError(ClientError):
    """A response body could not be parsed into the expected shape."""

    def __init__(self, message: str, *, body: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.body = body


class PermissionDeniedError(ClientError):
    """The current identity may not perform the requested screen action."""
