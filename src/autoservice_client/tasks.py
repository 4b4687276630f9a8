"""Keyed single-flight background operations.

Scheduling an operation under a key supersedes whatever ran under that key
before. Superseded operations are not interrupted; they keep running until
their next check of ``handle.cancelled`` and any result they produce is
ignored because their generation is no longer current.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from .logger import get_logger, log_action

logger = get_logger(__name__)


class TaskHandle:
    __slots__ = ("key", "generation", "_cancelled", "_done")

    def __init__(self, key: str, generation: int) -> None:
        self.key = key
        self.generation = generation
        self._cancelled = False
        self._done = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def __repr__(self) -> str:
        return f"TaskHandle(key={self.key!r}, generation={self.generation}, cancelled={self._cancelled})"


Operation = Callable[[TaskHandle], Awaitable[Any]]


class TaskSupervisor:
    def __init__(self, owner: str = "screen") -> None:
        self.owner = owner
        self._generations: dict[str, int] = {}
        self._handles: dict[str, TaskHandle] = {}
        self._running: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, key: str, operation: Operation) -> asyncio.Task[Any] | None:
        if self._closed:
            log_action(logger, module=self.owner, action=key, outcome="refused_after_teardown")
            return None

        previous = self._handles.get(key)
        if previous is not None and not previous.done and not previous.cancelled:
            previous._cancelled = True
            log_action(
                logger,
                module=self.owner,
                action=key,
                outcome="superseded",
                generation=previous.generation,
            )

        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        handle = TaskHandle(key, generation)
        self._handles[key] = handle

        task = asyncio.get_running_loop().create_task(
            self._run(handle, operation),
            name=f"{self.owner}:{key}#{generation}",
        )
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        return task

    def is_current(self, handle: TaskHandle) -> bool:
        return (
            not self._closed
            and not handle.cancelled
            and self._generations.get(handle.key) == handle.generation
        )

    def apply(self, handle: TaskHandle, mutation: Callable[[], None]) -> bool:
        """Run ``mutation`` only while ``handle`` is still the authoritative one."""
        if not self.is_current(handle):
            log_action(
                logger,
                module=self.owner,
                action=handle.key,
                outcome="stale_result_dropped",
                generation=handle.generation,
            )
            return False
        mutation()
        return True

    def currently_running(self, key: str) -> bool:
        handle = self._handles.get(key)
        return handle is not None and not handle.done and self.is_current(handle)

    def cancel_all(self) -> None:
        self._closed = True
        for key, handle in self._handles.items():
            handle._cancelled = True
            self._generations[key] = self._generations.get(key, 0) + 1
        log_action(logger, module=self.owner, action="cancel_all", outcome="teardown", keys=sorted(self._handles))

    async def drain(self) -> None:
        """Wait until every operation started by this supervisor has finished."""
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def _run(self, handle: TaskHandle, operation: Operation) -> Any:
        try:
            return await operation(handle)
        except Exception as exc:
            log_action(
                logger,
                module=self.owner,
                action=handle.key,
                outcome="operation_failed",
                error=f"{type(exc).__name__}: {exc}",
            )
            raise
        finally:
            handle._done = True
