from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

from ..clients.booking_client import BookingClient
from ..grouping import AppointmentBucket, build_buckets, sort_within_day
from ..identity import Identity
from ..models import Appointment
from .base import ScreenViewModel


class AdminAppointmentsViewModel(ScreenViewModel[Appointment]):
    """Admin day view. Changing the date supersedes the load for the previous date."""

    screen_name = "admin_appointments"
    load_key = "load_appointments"
    requires_admin = True

    def __init__(self, client: BookingClient, identity: Identity, selected_date: date | None = None) -> None:
        super().__init__(identity)
        self.client = client
        self.selected_date = selected_date or date.today()

    @property
    def buckets(self) -> list[AppointmentBucket[Appointment]]:
        return build_buckets(self.state.items)

    def select_date(self, day: date) -> asyncio.Task[Any] | None:
        self.selected_date = day
        return self.load()

    def load(self) -> asyncio.Task[Any] | None:
        self._require_admin(self.load_key)
        day = self.selected_date

        async def fetch() -> list[Appointment]:
            return sort_within_day(await self.client.get_admin_appointments(day))

        return self.tasks.schedule(self.load_key, lambda handle: self._load_into_state(handle, fetch))

    def _on_load_started(self) -> None:
        self.state.items = []
