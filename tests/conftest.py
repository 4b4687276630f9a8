from __future__ import annotations

import asyncio
from datetime import date
from typing import Any, Callable

import pytest

from autoservice_client.identity import Identity
from autoservice_client.models import Appointment, CreateAppointmentRequest, CreateOrderResponse, NewsItem, Season, TimeSlot, Tire


class Scripted:
    """Queue of remote results; each call takes the next one and waits for its gate."""

    def __init__(self) -> None:
        self._queue: list[tuple[asyncio.Event, Any]] = []
        self.calls: list[tuple[Any, ...]] = []

    def script(self, result: Any, *, released: bool = True) -> asyncio.Event:
        gate = asyncio.Event()
        if released:
            gate.set()
        self._queue.append((gate, result))
        return gate

    async def next(self, *args: Any) -> Any:
        self.calls.append(args)
        gate, result = self._queue.pop(0)
        await gate.wait()
        if isinstance(result, BaseException):
            raise result
        return result


class FakeTiresClient:
    def __init__(self) -> None:
        self.tires = Scripted()
        self.orders = Scripted()

    async def list_tires(self) -> list[Tire]:
        return await self.tires.next()

    async def create_order(self, item_id: int, quantity: int, idempotency_key: str | None = None) -> CreateOrderResponse:
        return await self.orders.next(item_id, quantity, idempotency_key)


class FakeBookingClient:
    def __init__(self) -> None:
        self.slots = Scripted()
        self.bookings = Scripted()
        self.appointments = Scripted()

    async def get_slots(self, day: date, service_id: int) -> list[TimeSlot]:
        return await self.slots.next(day, service_id)

    async def create_booking(self, request: CreateAppointmentRequest) -> None:
        return await self.bookings.next(request)

    async def get_admin_appointments(self, day: date) -> list[Appointment]:
        return await self.appointments.next(day)


class FakeNewsClient:
    def __init__(self) -> None:
        self.news = Scripted()
        self.published = Scripted()

    async def list_news(self) -> list[NewsItem]:
        return await self.news.next()

    async def create_news(self, item: NewsItem) -> None:
        return await self.published.next(item)


def make_tire(item_id: int | None, brand: str = "Michelin", model: str = "Pilot Sport 4", **overrides: Any) -> Tire:
    values: dict[str, Any] = {
        "id": item_id,
        "brand": brand,
        "model": model,
        "size": "225/45R17",
        "season": Season.SUMMER,
        "price": 8500.0,
        "stock_quantity": 8,
    }
    values.update(overrides)
    return Tire(**values)


async def wait_until(predicate: Callable[[], bool], attempts: int = 100) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was not reached")


@pytest.fixture
def admin() -> Identity:
    return Identity(token="admin-token", role="ADMIN")


@pytest.fixture
def customer() -> Identity:
    return Identity(token="user-token", role="USER")
