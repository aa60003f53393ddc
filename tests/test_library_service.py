"""Tests for the food library."""

import asyncio

import pytest

from calorie_tracker.domain.errors import ResolutionError, ResolutionKind
from calorie_tracker.domain.foods import LibraryItem
from calorie_tracker.services.library import DEFAULT_FOODS, FoodLibrary
from calorie_tracker.services.storage import StateSlot
from tests.conftest import CountingResolver, InMemoryStateStore


def test_lookup_or_insert_resolves_once() -> None:
    library = FoodLibrary()
    resolver = CountingResolver(LibraryItem("Ramen", 550, "bowl"))

    first = asyncio.run(library.lookup_or_insert("Ramen", resolver))
    second = asyncio.run(library.lookup_or_insert("Ramen", resolver))

    assert first == second
    assert resolver.calls == 1


def test_lookup_remembers_query_alias() -> None:
    library = FoodLibrary()
    resolver = CountingResolver(LibraryItem("Tonkotsu Ramen", 600, "bowl"))

    asyncio.run(library.lookup_or_insert("pork ramen", resolver))
    cached = asyncio.run(library.lookup_or_insert("pork ramen", resolver))

    assert cached.name == "Tonkotsu Ramen"
    assert resolver.calls == 1


def test_existing_item_is_never_overwritten() -> None:
    library = FoodLibrary.from_items([LibraryItem("Apple", 95, "piece")])
    resolver = CountingResolver(LibraryItem("Apple", 80, "piece"))

    result = asyncio.run(library.lookup_or_insert("green apple", resolver))

    assert result.calories_per_unit == 95
    assert library.items["Apple"].calories_per_unit == 95


@pytest.mark.parametrize(
    "item",
    [
        LibraryItem("", 100, "bowl"),
        LibraryItem("Soup", 100, " "),
        LibraryItem("Soup", -1, "bowl"),
        LibraryItem("Soup", float("nan"), "bowl"),
    ],
)
def test_malformed_item_is_rejected_without_mutation(item: LibraryItem) -> None:
    library = FoodLibrary()

    with pytest.raises(ResolutionError) as exc_info:
        asyncio.run(library.lookup_or_insert("soup", CountingResolver(item)))

    assert exc_info.value.kind == ResolutionKind.MALFORMED
    assert library.items == {}
    assert library.aliases == {}


def test_resolver_failure_is_classified() -> None:
    library = FoodLibrary()

    async def failing() -> LibraryItem:
        raise TimeoutError

    with pytest.raises(ResolutionError) as exc_info:
        asyncio.run(library.lookup_or_insert("soup", failing))

    assert exc_info.value.kind == ResolutionKind.TIMEOUT
    assert library.items == {}


def test_concurrent_lookups_share_one_resolution() -> None:
    library = FoodLibrary()
    calls = 0

    async def slow_resolver() -> LibraryItem:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return LibraryItem("Ramen", 550, "bowl")

    async def lookup_twice() -> list[LibraryItem]:
        return await asyncio.gather(
            library.lookup_or_insert("Ramen", slow_resolver),
            library.lookup_or_insert("Ramen", slow_resolver),
        )

    first, second = asyncio.run(lookup_twice())

    assert first == second
    assert calls == 1
    assert library.pending == {}


def test_concurrent_lookups_share_failure() -> None:
    library = FoodLibrary()
    calls = 0

    async def failing() -> LibraryItem:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        raise TimeoutError

    async def lookup_twice() -> list[object]:
        return await asyncio.gather(
            library.lookup_or_insert("soup", failing),
            library.lookup_or_insert("soup", failing),
            return_exceptions=True,
        )

    results = asyncio.run(lookup_twice())

    assert calls == 1
    assert all(isinstance(result, ResolutionError) for result in results)
    assert library.items == {}


def test_suggest_is_case_sensitive_substring() -> None:
    library = FoodLibrary.from_items(list(DEFAULT_FOODS))

    names = [item.name for item in library.suggest("Rice")]

    assert names == ["Fried Rice", "White Rice"]
    assert library.suggest("rice") == []
    assert len(library.suggest("")) == len(DEFAULT_FOODS)


def test_add_manual_persists_library() -> None:
    store = InMemoryStateStore()
    library = FoodLibrary(slot=StateSlot(store, "library"))

    item = library.add_manual("Granola", 4.5, "g")
    again = library.add_manual("Granola", 9.0, "g")

    assert again == item
    assert store.data["library"] == [
        {"name": "Granola", "calories_per_unit": 4.5, "unit": "g"}
    ]
