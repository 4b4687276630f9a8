from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..models import Appointment, CreateAppointmentRequest, TimeSlot
from .base import BaseClient, expect_list


def format_query_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


@dataclass
class BookingClient(BaseClient):
    async def get_slots(self, day: date, service_id: int) -> list[TimeSlot]:
        payload = await self._request(
            "GET",
            "/api/slots",
            params={"date": format_query_date(day), "serviceId": service_id},
            module="booking",
            operation="get_slots",
        )
        return [TimeSlot.model_validate(item) for item in expect_list(payload, "slots")]

    async def create_booking(self, request: CreateAppointmentRequest) -> None:
        await self._request(
            "POST",
            "/api/appointments",
            json_body=request.model_dump(mode="json", by_alias=True),
            module="booking",
            operation="create_booking",
        )

    async def get_admin_appointments(self, day: date) -> list[Appointment]:
        payload = await self._request(
            "GET",
            "/api/admin/appointments",
            params={"date": format_query_date(day)},
            module="admin",
            operation="get_admin_appointments",
        )
        return [Appointment.model_validate(item) for item in expect_list(payload, "appointments")]
