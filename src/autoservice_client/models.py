from __future__ import annotations

from datetime import datetime, time
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

WIRE_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


class WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)


class Season(str, Enum):
    SUMMER = "SUMMER"
    WINTER_STUDDED = "WINTER_STUDDED"
    WINTER_VELCRO = "WINTER_VELCRO"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Tire(WireModel):
    id: int | None = None
    brand: str | None = None
    model: str | None = None
    size: str | None = None
    season: Season | None = None
    price: float | None = None
    stock_quantity: int | None = None

    @property
    def display_name(self) -> str:
        return f"{self.brand or 'Unknown'} {self.model or ''}".strip()


class SlotTime(WireModel):
    hour: int = 0
    minute: int = 0

    def to_time(self) -> time:
        return time(hour=self.hour, minute=self.minute)


class TimeSlot(WireModel):
    time: SlotTime | None = None
    is_available: bool | None = None


class Appointment(WireModel):
    id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    service_name: str | None = None
    client_name: str | None = None
    client_phone: str | None = None
    status: str | None = None


class NewsItem(WireModel):
    id: int | None = None
    title: str
    content: str
    image_url: str | None = None
    created_at: datetime | None = None


class AdminOrder(WireModel):
    id: int | None = None
    created_at: datetime | None = None
    status: str | None = None
    total_price: float | None = None
    client_name: str | None = None
    client_phone: str | None = None
    items: dict[str, int] | None = None


class CreateOrderRequest(WireModel):
    # JSON object keys are strings, so item ids are sent as text.
    items: dict[str, int]

    @classmethod
    def for_item(cls, item_id: int, quantity: int) -> "CreateOrderRequest":
        return cls(items={str(item_id): quantity})


class CreateOrderResponse(WireModel):
    order_id: int | None = None


class CreateAppointmentRequest(WireModel):
    service_id: int
    start_time: datetime

    @field_serializer("start_time")
    def _serialize_start_time(self, value: datetime) -> str:
        return value.strftime(WIRE_DATETIME_FORMAT)
