"""Classification of remote-call failures into a closed set of error kinds.

Every failure is classified once, where the remote call returns; afterwards
only the resulting :data:`ErrorKind` travels through the view-models.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError as SchemaValidationError

from .error_mapper import extract_message
from .exceptions import ApiError, RequestCancelledError, ResponseDecodeError

NETWORK_FAILURE_MESSAGE = "Network error. Check your connection and try again."


@dataclass(frozen=True)
class Cancelled:
    pass


@dataclass(frozen=True)
class ServerRejected:
    status_code: int
    message: str | None = None

    @property
    def display_text(self) -> str:
        return self.message or f"server error {self.status_code}"


@dataclass(frozen=True)
class Transport:
    cause: BaseException


@dataclass(frozen=True)
class Decoding:
    cause: BaseException


ErrorKind = Union[Cancelled, ServerRejected, Transport, Decoding]

_DECODING_FAILURES = (ResponseDecodeError, json.JSONDecodeError, SchemaValidationError, UnicodeDecodeError)


def _parse_payload(payload: object) -> object:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except ValueError:
            return None
    return payload


def classify(
    failure: BaseException,
    status_code: int | None = None,
    payload: object | None = None,
) -> ErrorKind:
    """Map a raw failure to an error kind. First matching rule wins."""
    if isinstance(failure, (asyncio.CancelledError, RequestCancelledError)):
        return Cancelled()

    if status_code is None and isinstance(failure, ApiError):
        status_code = failure.status_code
        if payload is None:
            payload = failure.payload
    if status_code is not None:
        message = extract_message(_parse_payload(payload))
        if message is None:
            message = f"server error {status_code}"
        return ServerRejected(status_code=status_code, message=message)

    if isinstance(failure, _DECODING_FAILURES):
        return Decoding(cause=failure)
    return Transport(cause=failure)


def display_message(kind: ErrorKind | None) -> str | None:
    """Text shown to the user, or ``None`` when nothing should be shown."""
    if kind is None or isinstance(kind, Cancelled):
        return None
    if isinstance(kind, ServerRejected):
        return kind.display_text
    return NETWORK_FAILURE_MESSAGE


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None


def to_user_facing_error(kind: ErrorKind) -> UserFacingError | None:
    message = display_message(kind)
    if message is None:
        return None
    if isinstance(kind, ServerRejected):
        return UserFacingError(message=message, details=f"HTTP {kind.status_code}")
    if isinstance(kind, Decoding):
        return UserFacingError(message=message, details=f"decoding: {type(kind.cause).__name__}: {kind.cause}")
    return UserFacingError(message=message, details=f"transport: {type(kind.cause).__name__}: {kind.cause}")
