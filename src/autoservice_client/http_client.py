from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import Any

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import RequestCancelledError, ResponseDecodeError, TransportError
from .logger import get_logger, log_action

logger = get_logger(__name__)

TRACE_HEADER = "X-Trace-ID"


@dataclass
class TraceContext:
    """Trace id shared by every request of one session; the server may replace it."""

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def adopt(self, response: httpx.Response) -> None:
        # httpx header lookup is case-insensitive.
        trace_id = response.headers.get(TRACE_HEADER)
        if trace_id:
            self.trace_id = trace_id


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    client: httpx.AsyncClient | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                timeout=httpx.Timeout(
                    self.config.read_timeout_seconds,
                    connect=self.config.connect_timeout_seconds,
                ),
                limits=httpx.Limits(max_connections=self.config.max_connections),
                verify=self.config.verify_ssl,
            )

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> Any:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        started = time.monotonic()
        if self.client.is_closed:
            # The session was torn down; nothing is waiting for this answer.
            self._record_operation(module, operation, started, "cancelled", trace_context.trace_id)
            raise RequestCancelledError(
                f"{method.upper()} {path} abandoned: client closed",
                trace_id=trace_context.trace_id,
            )
        try:
            response = await self.client.request(
                method.upper(),
                path,
                headers=request_headers,
                json=json_body,
                params=params,
            )
        except asyncio.CancelledError:
            self._record_operation(module, operation, started, "cancelled", trace_context.trace_id)
            raise
        except httpx.TransportError as exc:
            self._record_operation(module, operation, started, "transport_error", trace_context.trace_id)
            raise TransportError(
                f"{type(exc).__name__}: {exc}",
                trace_id=trace_context.trace_id,
            ) from exc

        trace_context.adopt(response)
        if response.is_success:
            self._record_operation(module, operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ResponseDecodeError(
                    f"Response from {path} is not valid JSON",
                    body=response.text,
                ) from exc

        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text
        self._record_operation(module, operation, started, "error", trace_context.trace_id)
        raise map_error(response.status_code, payload, trace_context.trace_id)

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )
        log_action(
            logger,
            module=module,
            action=operation,
            outcome=result,
            trace_id=trace_id,
            duration_ms=self.last_operation.duration_ms,
        )
