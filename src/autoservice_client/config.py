from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:8080"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 10.0
    max_connections: int = 20
    verify_ssl: bool = True
    filter_debounce_ms: int = 300
    purchase_set_size: int = 4
    stock_conflict_statuses: frozenset[int] = frozenset({400, 409})

    @property
    def filter_debounce_seconds(self) -> float:
        return self.filter_debounce_ms / 1000


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _read_statuses(name: str, default: str) -> frozenset[int]:
    raw = os.getenv(name, default)
    try:
        return frozenset(int(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected comma separated status codes, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    api_base_url = (os.getenv("AUTOSERVICE_API_BASE_URL") or DEFAULT_API_BASE_URL).strip()
    _validate(bool(api_base_url), "Missing required config value: AUTOSERVICE_API_BASE_URL")

    timeout_seconds = _read_float("AUTOSERVICE_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid AUTOSERVICE_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    connect_timeout_seconds = _read_float(
        "AUTOSERVICE_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0))
    )
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid AUTOSERVICE_CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )

    read_timeout_seconds = _read_float(
        "AUTOSERVICE_READ_TIMEOUT_SECONDS",
        str(max(timeout_seconds, connect_timeout_seconds)),
    )
    _validate(
        read_timeout_seconds > 0,
        f"Invalid AUTOSERVICE_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    max_connections = _read_int("AUTOSERVICE_MAX_CONNECTIONS", "20")
    _validate(
        max_connections >= 1,
        f"Invalid AUTOSERVICE_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    filter_debounce_ms = _read_int("AUTOSERVICE_FILTER_DEBOUNCE_MS", "300")
    _validate(
        filter_debounce_ms >= 0,
        f"Invalid AUTOSERVICE_FILTER_DEBOUNCE_MS: expected >= 0, got {filter_debounce_ms}",
    )

    purchase_set_size = _read_int("AUTOSERVICE_PURCHASE_SET_SIZE", "4")
    _validate(
        purchase_set_size >= 1,
        f"Invalid AUTOSERVICE_PURCHASE_SET_SIZE: expected >= 1, got {purchase_set_size}",
    )

    stock_conflict_statuses = _read_statuses("AUTOSERVICE_STOCK_CONFLICT_STATUSES", "400,409")
    _validate(
        all(400 <= status <= 599 for status in stock_conflict_statuses),
        "Invalid AUTOSERVICE_STOCK_CONFLICT_STATUSES: expected HTTP error status codes",
    )

    return ClientConfig(
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        max_connections=max_connections,
        verify_ssl=_coerce_bool(os.getenv("AUTOSERVICE_VERIFY_SSL"), True),
        filter_debounce_ms=filter_debounce_ms,
        purchase_set_size=purchase_set_size,
        stock_conflict_statuses=stock_conflict_statuses,
    )
