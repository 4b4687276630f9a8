from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, Sequence, TypeVar

from ..errors import Cancelled, ErrorKind, classify, display_message
from ..exceptions import PermissionDeniedError
from ..identity import ANONYMOUS, Identity
from ..logger import get_logger, log_action
from ..tasks import TaskHandle, TaskSupervisor
from .state import RemoteCollectionState, ScreenState, resolve_view_status

T = TypeVar("T")

logger = get_logger(__name__)

Observer = Callable[[ScreenState[Any]], None]


class ScreenViewModel(Generic[T]):
    """Shared plumbing for one screen: collection state, observers, single-flight loads.

    Subclasses set ``screen_name`` and ``load_key`` and implement ``_fetch``.
    Every state change visible to the UI goes through ``TaskSupervisor.apply``
    so results of superseded loads are dropped.
    """

    screen_name = "screen"
    load_key = "load"
    requires_admin = False

    def __init__(self, identity: Identity = ANONYMOUS) -> None:
        self.identity = identity
        self.state: RemoteCollectionState[T] = RemoteCollectionState()
        self.tasks = TaskSupervisor(owner=self.screen_name)
        self._message: str | None = None
        self._observers: list[Observer] = []

    @property
    def derived_items(self) -> list[T]:
        return list(self.state.items)

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def last_error_message(self) -> str | None:
        return self._message

    def snapshot(self) -> ScreenState[T]:
        items = tuple(self.derived_items)
        return ScreenState(
            items=items,
            is_loading=self.state.is_loading,
            last_error_message=self._message,
            status=resolve_view_status(
                loading=self.state.is_loading,
                has_data=bool(items),
                error=self._message,
            ),
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def load(self) -> asyncio.Task[Any] | None:
        if self.requires_admin:
            self._require_admin(self.load_key)
        return self.tasks.schedule(self.load_key, self._load)

    def refresh(self) -> asyncio.Task[Any] | None:
        return self.load()

    def close(self) -> None:
        self.tasks.cancel_all()
        self._observers.clear()

    async def _fetch(self) -> Sequence[T]:
        raise NotImplementedError

    async def _load(self, handle: TaskHandle) -> None:
        await self._load_into_state(handle, self._fetch)

    async def _load_into_state(self, handle: TaskHandle, fetch: Callable[[], Any]) -> bool:
        """Run ``fetch`` and store its items; returns whether they were stored."""
        if not self.tasks.apply(handle, self._start_loading):
            return False
        try:
            items = await fetch()
        except asyncio.CancelledError:
            self.tasks.apply(handle, lambda: self._finish_with_error(Cancelled()))
            raise
        except Exception as exc:
            kind = classify(exc)
            self.tasks.apply(handle, lambda: self._finish_with_error(kind))
            return False
        return self.tasks.apply(handle, lambda: self._finish_with_items(items))

    def _start_loading(self) -> None:
        self.state.is_loading = True
        self.state.last_error = None
        self._message = None
        self._on_load_started()
        self._notify()

    def _on_load_started(self) -> None:
        pass

    def _on_items_loaded(self, items: list[T]) -> None:
        pass

    def _finish_with_items(self, items: Sequence[T]) -> None:
        self.state.items = list(items)
        self.state.is_loading = False
        self._on_items_loaded(self.state.items)
        log_action(logger, module=self.screen_name, action=self.load_key, outcome="success", count=len(items))
        self._notify()

    def _finish_with_error(self, kind: ErrorKind) -> None:
        self.state.is_loading = False
        self._set_error(kind)

    def _set_error(self, kind: ErrorKind, action: str | None = None) -> None:
        action = action or self.load_key
        if isinstance(kind, Cancelled):
            log_action(logger, module=self.screen_name, action=action, outcome="cancelled", level=logging.DEBUG)
            self._notify()
            return
        self.state.last_error = kind
        self._message = display_message(kind)
        log_action(
            logger,
            module=self.screen_name,
            action=action,
            outcome="error",
            level=logging.WARNING,
            error=type(kind).__name__,
            message=self._message,
        )
        self._notify()

    def _set_message(self, message: str | None) -> None:
        self._message = message
        self._notify()

    def _require_admin(self, action: str) -> None:
        if not self.identity.is_admin:
            log_action(logger, module=self.screen_name, action=action, outcome="permission_denied", level=logging.WARNING)
            raise PermissionDeniedError(f"{self.screen_name}.{action} requires the ADMIN role")

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)
