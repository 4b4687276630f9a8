from __future__ import annotations

import pytest

from conftest import make_tire

from autoservice_client.filtering import (
    DEFAULT_PRICE_MAX,
    DEFAULT_PRICE_MIN,
    Debouncer,
    FilterCriteria,
    FilterEngine,
    apply_filters,
    available_brands,
    observed_price_range,
)
from autoservice_client.models import Season


def _catalog():
    return [
        make_tire(1, "Michelin", "Pilot Sport 4", price=8500.0),
        make_tire(2, "Michelin", "CrossClimate", price=8000.0),
        make_tire(3, "Nokian", "Hakkapeliitta 10", season=Season.WINTER_STUDDED, price=9900.0, size="205/55R16"),
        make_tire(4, "Continental", "IceContact", season=Season.WINTER_STUDDED, price=None),
    ]


def test_season_price_and_text_filters_pick_the_matching_tire() -> None:
    items = [
        make_tire(1, "Michelin", "Pilot Sport 4", price=8500.0),
        make_tire(2, "Michelin", "CrossClimate", price=8000.0),
    ]
    criteria = FilterCriteria(season=Season.SUMMER, price_min=5000, price_max=9000, search_text="pilot")

    assert [tire.id for tire in apply_filters(items, criteria)] == [1]


def test_apply_filters_is_pure_and_idempotent() -> None:
    items = _catalog()
    snapshot = list(items)
    criteria = FilterCriteria(price_min=8000, price_max=10000, brands=frozenset({"Michelin", "Nokian"}))

    once = apply_filters(items, criteria)
    twice = apply_filters(once, criteria)

    assert once == twice
    assert items == snapshot
    assert [tire.id for tire in once] == [1, 2, 3]


def test_items_without_price_never_pass() -> None:
    assert 4 not in [tire.id for tire in apply_filters(_catalog(), FilterCriteria())]


def test_search_matches_brand_model_or_size_case_insensitively() -> None:
    items = _catalog()

    assert [t.id for t in apply_filters(items, FilterCriteria(search_text="NOKIAN"))] == [3]
    assert [t.id for t in apply_filters(items, FilterCriteria(search_text="205/55"))] == [3]
    assert [t.id for t in apply_filters(items, FilterCriteria(search_text="cross"))] == [2]


def test_empty_brand_set_means_any_brand() -> None:
    items = _catalog()
    criteria = FilterCriteria(brands=frozenset())

    assert [t.id for t in apply_filters(items, criteria)] == [1, 2, 3]


def test_price_bounds_never_cross() -> None:
    criteria = FilterCriteria(price_min=1000, price_max=5000)

    raised_min = criteria.with_field("price_min", 7000)
    lowered_max = criteria.with_field("price_max", 200)

    assert (raised_min.price_min, raised_min.price_max) == (5000, 5000)
    assert (lowered_max.price_min, lowered_max.price_max) == (1000, 1000)


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown filter field"):
        FilterCriteria().with_field("color", "red")


def test_defaults_follow_observed_prices() -> None:
    items = _catalog()

    assert observed_price_range(items) == (8000.0, 9900.0)
    assert observed_price_range([]) == (DEFAULT_PRICE_MIN, DEFAULT_PRICE_MAX)
    assert available_brands(items) == ["Continental", "Michelin", "Nokian"]
    assert FilterCriteria.defaults_for(items) == FilterCriteria(price_min=8000.0, price_max=9900.0)


@pytest.mark.asyncio
async def test_rapid_edits_produce_one_recomputation_with_the_last_criteria() -> None:
    updates: list[list[int | None]] = []
    engine = FilterEngine(
        _catalog(),
        debounce_seconds=0.05,
        on_update=lambda visible: updates.append([t.id for t in visible]),
    )

    engine.set_field("search_text", "m")
    engine.set_field("search_text", "mi")
    engine.set_field("search_text", "pilot")
    assert engine.pending is True
    assert engine.recomputations == 0

    await engine.settled()

    assert engine.recomputations == 1
    assert updates == [[1]]
    assert engine.criteria.search_text == "pilot"


@pytest.mark.asyncio
async def test_debounce_waits_for_the_configured_interval() -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    fired: list[int] = []
    debouncer = Debouncer(0.3, lambda: fired.append(1), sleep=fake_sleep)

    debouncer.trigger()
    debouncer.trigger()
    await debouncer.settled()

    assert sleeps == [0.3]
    assert fired == [1]
    assert debouncer.pending is False


@pytest.mark.asyncio
async def test_reset_and_source_replacement_apply_immediately() -> None:
    engine = FilterEngine(debounce_seconds=10)
    assert engine.visible == []

    engine.set_source(_catalog())
    assert engine.recomputations == 1
    assert engine.criteria.price_min == 8000.0
    assert engine.criteria.price_max == 9900.0
    assert [t.id for t in engine.visible] == [1, 2, 3]

    engine.toggle_brand("Nokian")
    assert engine.pending is True
    engine.reset()

    assert engine.pending is False
    assert engine.recomputations == 2
    assert engine.criteria == FilterCriteria(price_min=8000.0, price_max=9900.0)


@pytest.mark.asyncio
async def test_edited_price_bounds_survive_a_source_reload() -> None:
    engine = FilterEngine(_catalog(), debounce_seconds=0)
    engine.set_field("price_min", 8400)
    await engine.settled()

    engine.set_source(_catalog()[:2])

    assert engine.criteria.price_min == 8400
    assert [t.id for t in engine.visible] == [1]


@pytest.mark.asyncio
async def test_toggle_brand_adds_and_removes() -> None:
    engine = FilterEngine(_catalog(), debounce_seconds=0)

    engine.toggle_brand("Michelin")
    await engine.settled()
    assert [t.id for t in engine.visible] == [1, 2]

    engine.toggle_brand("Michelin")
    await engine.settled()
    assert engine.criteria.brands == frozenset()
    assert [t.id for t in engine.visible] == [1, 2, 3]
