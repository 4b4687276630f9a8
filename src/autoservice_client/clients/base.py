from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import ResponseDecodeError
from ..http_client import HttpClient


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        return await self.http.request(method, path, headers=merged, **kwargs)


def expect_list(payload: Any, what: str) -> list[Any]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ResponseDecodeError(f"Expected {what} response to be a JSON array")
    return payload
