from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

from .errors import Cancelled, ErrorKind, ServerRejected, classify, display_message
from .idempotency import new_idempotency_key
from .logger import get_logger, log_action
from .models import Tire

logger = get_logger(__name__)

DEFAULT_SET_SIZE = 4
DEFAULT_STOCK_CONFLICT_STATUSES = frozenset({400, 409})
INSUFFICIENT_STOCK_MESSAGE = "Insufficient stock"


class PurchaseState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    SUBMITTING = "submitting"
    REJECTED = "rejected"
    COMMITTED = "committed"
    REJECTED_STOCK = "rejected_stock"
    REJECTED_OTHER = "rejected_other"


@dataclass
class PurchaseAttempt:
    item_id: int | None
    requested_quantity: int
    state: PurchaseState = PurchaseState.CHECKING
    message: str | None = None
    error: ErrorKind | None = None
    idempotency_key: str | None = None

    @property
    def reached_server(self) -> bool:
        return self.idempotency_key is not None


class OrderPlacer(Protocol):
    async def create_order(self, item_id: int, quantity: int, idempotency_key: str | None = None) -> Any:
        ...


class PurchaseCoordinator:
    """Commits fixed-size purchases against a possibly stale local stock count."""

    def __init__(
        self,
        orders: OrderPlacer,
        reload: Callable[[], Awaitable[None]],
        *,
        set_size: int = DEFAULT_SET_SIZE,
        stock_conflict_statuses: frozenset[int] = DEFAULT_STOCK_CONFLICT_STATUSES,
    ) -> None:
        self.orders = orders
        self.reload = reload
        self.set_size = set_size
        self.stock_conflict_statuses = stock_conflict_statuses
        self._submitting: dict[int, PurchaseAttempt] = {}
        self._last: dict[int, PurchaseAttempt] = {}

    def is_submitting(self, item_id: int) -> bool:
        return item_id in self._submitting

    def state_of(self, item_id: int) -> PurchaseState:
        if item_id in self._submitting:
            return PurchaseState.SUBMITTING
        last = self._last.get(item_id)
        return last.state if last is not None else PurchaseState.IDLE

    def has_local_stock(self, item: Tire) -> bool:
        return (item.stock_quantity or 0) >= self.set_size

    def reject(self, item_id: int | None, message: str) -> PurchaseAttempt:
        attempt = PurchaseAttempt(item_id=item_id, requested_quantity=self.set_size)
        return self._finish(attempt, PurchaseState.REJECTED_OTHER, message=message)

    def acknowledge(self, item_id: int) -> None:
        """Forget the terminal attempt once the user has seen its outcome."""
        if item_id not in self._submitting:
            self._last.pop(item_id, None)

    async def purchase(self, item: Tire) -> PurchaseAttempt:
        if item.id is None:
            return self.reject(None, "Invalid item identifier")
        item_id = item.id
        attempt = PurchaseAttempt(item_id=item_id, requested_quantity=self.set_size)

        if item_id in self._submitting:
            return self._finish(
                attempt,
                PurchaseState.REJECTED,
                message="A purchase for this item is already in progress",
            )
        if not self.has_local_stock(item):
            return self._finish(
                attempt,
                PurchaseState.REJECTED,
                message=f"Not enough stock: a set needs at least {self.set_size} units",
            )

        attempt.state = PurchaseState.SUBMITTING
        attempt.idempotency_key = new_idempotency_key("order-create")
        self._submitting[item_id] = attempt
        self._last[item_id] = attempt
        log_action(logger, module="purchase", action="submit", outcome="submitting", item_id=item_id)
        try:
            await self.orders.create_order(item_id, self.set_size, idempotency_key=attempt.idempotency_key)
        except asyncio.CancelledError:
            self._finish(attempt, PurchaseState.REJECTED_OTHER, error=Cancelled())
            raise
        except Exception as exc:
            kind = classify(exc)
        else:
            kind = None
        finally:
            self._submitting.pop(item_id, None)

        if kind is None:
            self._finish(attempt, PurchaseState.COMMITTED)
            await self.reload()
            return attempt
        if isinstance(kind, ServerRejected) and kind.status_code in self.stock_conflict_statuses:
            self._finish(attempt, PurchaseState.REJECTED_STOCK, message=INSUFFICIENT_STOCK_MESSAGE, error=kind)
            await self.reload()
            return attempt
        return self._finish(attempt, PurchaseState.REJECTED_OTHER, message=display_message(kind), error=kind)

    def _finish(
        self,
        attempt: PurchaseAttempt,
        state: PurchaseState,
        *,
        message: str | None = None,
        error: ErrorKind | None = None,
    ) -> PurchaseAttempt:
        attempt.state = state
        attempt.message = message
        attempt.error = error
        if attempt.item_id is not None and attempt.item_id not in self._submitting:
            self._last[attempt.item_id] = attempt
        log_action(
            logger,
            module="purchase",
            action="finish",
            outcome=state.value,
            item_id=attempt.item_id,
            message=message,
        )
        return attempt
