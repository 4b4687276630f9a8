"""Day buckets and chronological ordering for appointment lists.

Appointments without a start time are kept in an explicit ``UNSCHEDULED``
bucket which always sorts after every calendar day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Generic, Iterable, Mapping, Protocol, Sequence, TypeVar, Union


class _Unscheduled:
    _instance: "_Unscheduled | None" = None

    def __new__(cls) -> "_Unscheduled":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSCHEDULED"


UNSCHEDULED = _Unscheduled()

DayKey = Union[date, _Unscheduled]


class Scheduled(Protocol):
    start_time: datetime | None


ItemT = TypeVar("ItemT", bound=Scheduled)


@dataclass(frozen=True)
class AppointmentBucket(Generic[ItemT]):
    day: DayKey
    items: tuple[ItemT, ...]
    sorted_by_start_time: bool = True

    @property
    def is_unscheduled(self) -> bool:
        return self.day is UNSCHEDULED


def day_of(start_time: datetime | None) -> DayKey:
    if start_time is None:
        return UNSCHEDULED
    if start_time.tzinfo is not None:
        start_time = start_time.astimezone()
    return start_time.date()


def group_by_day(items: Iterable[ItemT]) -> dict[DayKey, list[ItemT]]:
    grouped: dict[DayKey, list[ItemT]] = {}
    for item in items:
        grouped.setdefault(day_of(item.start_time), []).append(item)
    return grouped


def sorted_days(grouped: Mapping[DayKey, object]) -> list[DayKey]:
    days = sorted(day for day in grouped if isinstance(day, date))
    if UNSCHEDULED in grouped:
        days.append(UNSCHEDULED)
    return days


def _sort_instant(value: datetime) -> float:
    # Aware and naive datetimes do not compare; timestamp() reads naive values as local time.
    return value.timestamp()


def sort_within_day(items: Sequence[ItemT]) -> list[ItemT]:
    timed = [item for item in items if item.start_time is not None]
    untimed = [item for item in items if item.start_time is None]
    timed.sort(key=lambda item: _sort_instant(item.start_time))
    return timed + untimed


def build_buckets(items: Iterable[ItemT]) -> list[AppointmentBucket[ItemT]]:
    grouped = group_by_day(items)
    return [
        AppointmentBucket(day=day, items=tuple(sort_within_day(grouped[day])))
        for day in sorted_days(grouped)
    ]
