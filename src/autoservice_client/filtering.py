from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Generic, Iterable, Protocol, Sequence, TypeVar

from .logger import get_logger, log_action
from .models import Season

logger = get_logger(__name__)

DEFAULT_PRICE_MIN = 0.0
DEFAULT_PRICE_MAX = 100000.0
DEFAULT_DEBOUNCE_SECONDS = 0.3


class Filterable(Protocol):
    season: Season | None
    price: float | None
    brand: str | None
    model: str | None
    size: str | None


ItemT = TypeVar("ItemT", bound=Filterable)


def observed_price_range(items: Iterable[Filterable]) -> tuple[float, float]:
    prices = [item.price for item in items if item.price is not None]
    if not prices:
        return DEFAULT_PRICE_MIN, DEFAULT_PRICE_MAX
    return min(prices), max(prices)


def available_brands(items: Iterable[Filterable]) -> list[str]:
    return sorted({item.brand for item in items if item.brand})


@dataclass(frozen=True)
class FilterCriteria:
    season: Season | None = None
    price_min: float = DEFAULT_PRICE_MIN
    price_max: float = DEFAULT_PRICE_MAX
    search_text: str = ""
    brands: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def defaults_for(cls, items: Iterable[Filterable]) -> "FilterCriteria":
        low, high = observed_price_range(items)
        return cls(price_min=low, price_max=high)

    def with_field(self, name: str, value: Any) -> "FilterCriteria":
        """Return a copy with one field written; price bounds never cross."""
        if name == "season":
            return replace(self, season=Season(value) if value is not None else None)
        if name == "price_min":
            return replace(self, price_min=min(float(value), self.price_max))
        if name == "price_max":
            return replace(self, price_max=max(float(value), self.price_min))
        if name == "search_text":
            return replace(self, search_text=value or "")
        if name == "brands":
            return replace(self, brands=frozenset(value or ()))
        raise ValueError(f"Unknown filter field: {name!r}")


def _matches_text(item: Filterable, query: str) -> bool:
    for candidate in (item.brand, item.model, item.size):
        if candidate and query in candidate.lower():
            return True
    return False


def apply_filters(items: Sequence[ItemT], criteria: FilterCriteria) -> list[ItemT]:
    result = list(items)
    if criteria.season is not None:
        result = [item for item in result if item.season == criteria.season]
    result = [
        item
        for item in result
        if item.price is not None and criteria.price_min <= item.price <= criteria.price_max
    ]
    if criteria.brands:
        result = [item for item in result if item.brand is not None and item.brand in criteria.brands]
    if criteria.search_text:
        query = criteria.search_text.lower()
        result = [item for item in result if _matches_text(item, query)]
    return result


class Debouncer:
    """Trailing-edge debounce: ``callback`` runs once per quiet period."""

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.interval_seconds = max(0.0, interval_seconds)
        self._callback = callback
        self._sleep = sleep
        self._pending: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self) -> None:
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fire_later())

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def settled(self) -> None:
        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})

    async def _fire_later(self) -> None:
        await self._sleep(self.interval_seconds)
        self._pending = None
        self._callback()


class FilterEngine(Generic[ItemT]):
    def __init__(
        self,
        source: Sequence[ItemT] = (),
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_update: Callable[[list[ItemT]], None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._source: list[ItemT] = list(source)
        self._defaults = FilterCriteria.defaults_for(self._source)
        self.criteria = self._defaults
        self.visible: list[ItemT] = apply_filters(self._source, self.criteria)
        self.recomputations = 0
        self._on_update = on_update
        self._debouncer = Debouncer(debounce_seconds, self._recompute, sleep=sleep)

    @property
    def source(self) -> list[ItemT]:
        return list(self._source)

    @property
    def available_brands(self) -> list[str]:
        return available_brands(self._source)

    @property
    def price_range(self) -> tuple[float, float]:
        return self._defaults.price_min, self._defaults.price_max

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def set_field(self, name: str, value: Any) -> None:
        self.criteria = self.criteria.with_field(name, value)
        self.on_criteria_changed()

    def toggle_brand(self, brand: str) -> None:
        brands = set(self.criteria.brands)
        brands.symmetric_difference_update({brand})
        self.set_field("brands", brands)

    def on_criteria_changed(self) -> None:
        self._debouncer.trigger()

    def set_source(self, items: Sequence[ItemT]) -> None:
        """Replace the source collection and recompute without debouncing."""
        self._source = list(items)
        previous_defaults = self._defaults
        self._defaults = FilterCriteria.defaults_for(self._source)
        if (self.criteria.price_min, self.criteria.price_max) == (
            previous_defaults.price_min,
            previous_defaults.price_max,
        ):
            self.criteria = replace(
                self.criteria,
                price_min=self._defaults.price_min,
                price_max=self._defaults.price_max,
            )
        self._debouncer.cancel()
        self._recompute()

    def reset(self) -> None:
        self._defaults = FilterCriteria.defaults_for(self._source)
        self.criteria = self._defaults
        self._debouncer.cancel()
        self._recompute()

    async def settled(self) -> None:
        await self._debouncer.settled()

    def close(self) -> None:
        self._debouncer.cancel()

    def _recompute(self) -> None:
        self.visible = apply_filters(self._source, self.criteria)
        self.recomputations += 1
        log_action(
            logger,
            module="filters",
            action="recompute",
            outcome="success",
            level=logging.DEBUG,
            visible=len(self.visible),
            total=len(self._source),
        )
        if self._on_update is not None:
            self._on_update(self.visible)
