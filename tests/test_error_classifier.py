from __future__ import annotations

import asyncio

import httpx
import pydantic
import pytest

from autoservice_client.error_mapper import extract_message, map_error
from autoservice_client.errors import (
    NETWORK_FAILURE_MESSAGE,
    Cancelled,
    Decoding,
    ServerRejected,
    Transport,
    classify,
    display_message,
    to_user_facing_error,
)
from autoservice_client.exceptions import (
    ConflictError,
    RequestCancelledError,
    ResponseDecodeError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from autoservice_client.models import Tire


def test_cancellation_wins_over_everything() -> None:
    assert classify(asyncio.CancelledError()) == Cancelled()
    assert classify(RequestCancelledError("abandoned")) == Cancelled()
    assert classify(asyncio.CancelledError(), status_code=500, payload={"error": "boom"}) == Cancelled()


def test_status_code_with_error_body_becomes_server_rejected() -> None:
    kind = classify(RuntimeError("http"), status_code=400, payload=b'{"error": "Not enough tires"}')

    assert kind == ServerRejected(status_code=400, message="Not enough tires")
    assert display_message(kind) == "Not enough tires"


def test_status_code_without_message_uses_fallback_text() -> None:
    kind = classify(RuntimeError("http"), status_code=503, payload="<html>down</html>")

    assert kind == ServerRejected(status_code=503, message="server error 503")
    assert display_message(kind) == "server error 503"


def test_api_error_carries_its_own_status_and_payload() -> None:
    error = map_error(409, {"message": "Slot already booked"}, "trace-1")

    assert isinstance(error, ConflictError)
    assert classify(error) == ServerRejected(status_code=409, message="Slot already booked")


def test_decoding_failures_are_classified_as_decoding() -> None:
    with pytest.raises(pydantic.ValidationError) as excinfo:
        Tire.model_validate({"price": "not-a-number"})

    assert isinstance(classify(excinfo.value), Decoding)
    assert isinstance(classify(ResponseDecodeError("bad body")), Decoding)


def test_everything_else_is_transport() -> None:
    assert isinstance(classify(TransportError("connection refused")), Transport)
    assert isinstance(classify(httpx.ConnectError("down")), Transport)
    assert isinstance(classify(OSError("socket closed")), Transport)


def test_display_message_hides_cancellation_and_merges_network_failures() -> None:
    assert display_message(Cancelled()) is None
    assert display_message(None) is None
    assert display_message(Transport(cause=OSError("x"))) == NETWORK_FAILURE_MESSAGE
    assert display_message(Decoding(cause=ValueError("x"))) == NETWORK_FAILURE_MESSAGE


def test_user_facing_error_keeps_details_for_diagnostics() -> None:
    rejected = to_user_facing_error(ServerRejected(status_code=400, message="Insufficient stock"))
    decoding = to_user_facing_error(Decoding(cause=ValueError("bad json")))

    assert rejected is not None and rejected.details == "HTTP 400"
    assert decoding is not None and decoding.message == NETWORK_FAILURE_MESSAGE
    assert "ValueError" in (decoding.details or "")
    assert to_user_facing_error(Cancelled()) is None


def test_extract_message_prefers_message_then_error() -> None:
    assert extract_message({"message": "first", "error": "second"}) == "first"
    assert extract_message({"message": "  ", "error": "second"}) == "second"
    assert extract_message({"detail": "ignored"}) is None
    assert extract_message(["not", "a", "mapping"]) is None


def test_error_mapper_classes() -> None:
    assert isinstance(map_error(401, {"code": "INVALID_TOKEN"}, None), UnauthorizedError)
    assert isinstance(map_error(400, {"error": "Insufficient stock"}, None), ValidationError)
    server = map_error(500, None, "trace-500")
    assert isinstance(server, ServerError)
    assert "trace_id=trace-500" in str(server)
