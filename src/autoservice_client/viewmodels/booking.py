from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Any

from ..clients.booking_client import BookingClient
from ..config import ClientConfig
from ..errors import ServerRejected, classify
from ..identity import ANONYMOUS, Identity
from ..logger import get_logger, log_action
from ..models import CreateAppointmentRequest, TimeSlot
from ..tasks import TaskHandle
from .base import ScreenViewModel

logger = get_logger(__name__)


def combine_date_and_time(day: date, slot: TimeSlot) -> datetime | None:
    if slot.time is None:
        return None
    return datetime.combine(day, slot.time.to_time())


class BookingViewModel(ScreenViewModel[TimeSlot]):
    screen_name = "booking"
    load_key = "load_slots"
    book_key = "book_slot"

    def __init__(
        self,
        client: BookingClient,
        service_id: int,
        service_name: str,
        identity: Identity = ANONYMOUS,
        config: ClientConfig | None = None,
        selected_date: date | None = None,
    ) -> None:
        super().__init__(identity)
        self.client = client
        self.service_id = service_id
        self.service_name = service_name
        self.conflict_statuses = (config or ClientConfig()).stock_conflict_statuses
        self.selected_date = selected_date or date.today()
        self.selected_slot_index: int | None = None
        self.is_booking = False
        self.show_success = False

    def select_slot(self, index: int) -> None:
        self.selected_slot_index = index
        self._notify()

    def select_date(self, day: date) -> asyncio.Task[Any] | None:
        self.selected_date = day
        return self.load()

    def load(self) -> asyncio.Task[Any] | None:
        day = self.selected_date

        async def fetch() -> list[TimeSlot]:
            return await self.client.get_slots(day, self.service_id)

        return self.tasks.schedule(self.load_key, lambda handle: self._load_into_state(handle, fetch))

    async def book(self) -> bool:
        if self.is_booking:
            return False
        index = self.selected_slot_index
        if index is None or not 0 <= index < len(self.state.items):
            self._set_message("Please choose a time")
            return False
        slot = self.state.items[index]
        if slot.is_available is not True:
            self._set_message("This time is already taken")
            return False
        start_time = combine_date_and_time(self.selected_date, slot)
        if start_time is None:
            self._set_message("Could not build the appointment time")
            return False

        request = CreateAppointmentRequest(service_id=self.service_id, start_time=start_time)
        task = self.tasks.schedule(self.book_key, lambda handle: self._book(handle, request))
        if task is None:
            return False
        self.is_booking = True
        self.show_success = False
        self._set_message(None)
        return await task

    async def _book(self, handle: TaskHandle, request: CreateAppointmentRequest) -> bool:
        try:
            await self.client.create_booking(request)
        except asyncio.CancelledError:
            self.tasks.apply(handle, self._end_booking)
            raise
        except Exception as exc:
            kind = classify(exc)
        else:
            kind = None

        if kind is None:
            def succeed() -> None:
                self.show_success = True
                self._end_booking()
                log_action(logger, module=self.screen_name, action="book", outcome="success", service_id=self.service_id)

            return self.tasks.apply(handle, succeed)

        if (
            isinstance(kind, ServerRejected)
            and kind.status_code in self.conflict_statuses
            and self.tasks.is_current(handle)
        ):
            # The slot was taken by someone else; refresh availability before showing why.
            reload = self.load()
            if reload is not None:
                await reload

        def fail() -> None:
            self.is_booking = False
            self._set_error(kind, action="book")

        self.tasks.apply(handle, fail)
        return False

    def _end_booking(self) -> None:
        self.is_booking = False
        self._notify()

    def _on_load_started(self) -> None:
        self.state.items = []
        self.selected_slot_index = None
