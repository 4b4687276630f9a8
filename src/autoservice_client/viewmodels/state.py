from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from ..errors import ErrorKind

T = TypeVar("T")


@dataclass
class RemoteCollectionState(Generic[T]):
    """Server truth for one screen. Only the owning view-model writes to it."""

    items: list[T] = field(default_factory=list)
    is_loading: bool = False
    last_error: ErrorKind | None = None


class ViewStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ScreenState(Generic[T]):
    items: tuple[T, ...]
    is_loading: bool
    last_error_message: str | None
    status: ViewStatus

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "count": len(self.items),
            "is_loading": self.is_loading,
            "message": self.last_error_message,
        }


def resolve_view_status(*, loading: bool, has_data: bool, error: str | None) -> ViewStatus:
    if loading:
        return ViewStatus.LOADING
    if error and not has_data:
        return ViewStatus.ERROR
    if not has_data:
        return ViewStatus.EMPTY
    return ViewStatus.SUCCESS
