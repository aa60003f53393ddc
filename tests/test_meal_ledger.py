"""Tests for the meal ledger."""

import pytest

from calorie_tracker.domain.foods import LibraryItem, MealCategory, Provenance
from calorie_tracker.services.meals import MIN_QUANTITY, MealLedger
from calorie_tracker.services.storage import StateSlot
from tests.conftest import InMemoryStateStore

RICE = LibraryItem(name="White Rice", calories_per_unit=200, unit="bowl")
EGG = LibraryItem(name="Boiled Egg", calories_per_unit=70, unit="piece")


def test_add_creates_entry_with_single_unit() -> None:
    ledger = MealLedger()

    entry = ledger.add(RICE, MealCategory.LUNCH, Provenance.AI)

    assert entry.quantity == 1
    assert entry.category == MealCategory.LUNCH
    assert entry.provenance == Provenance.AI
    assert ledger.entries == [entry]


def test_adjust_quantity_never_drops_below_floor() -> None:
    ledger = MealLedger()
    entry = ledger.add(EGG, MealCategory.BREAKFAST)

    ledger.adjust_quantity(entry.id, -0.5)
    ledger.adjust_quantity(entry.id, -0.5)
    ledger.adjust_quantity(entry.id, -5)

    updated = ledger.get(entry.id)
    assert updated is not None
    assert updated.quantity == MIN_QUANTITY
    assert len(ledger.entries) == 1


def test_adjust_quantity_increments() -> None:
    ledger = MealLedger()
    entry = ledger.add(EGG, MealCategory.BREAKFAST)

    ledger.adjust_quantity(entry.id, 0.5)

    updated = ledger.get(entry.id)
    assert updated is not None
    assert updated.quantity == 1.5
    assert ledger.total_calories() == pytest.approx(105)


@pytest.mark.parametrize("delta", [0.3, 1.25, float("inf"), float("nan")])
def test_adjust_quantity_rejects_off_step_delta(delta: float) -> None:
    store = InMemoryStateStore()
    ledger = MealLedger(slot=StateSlot(store, "ledger"))
    entry = ledger.add(EGG, MealCategory.BREAKFAST)
    writes = len(store.writes)

    with pytest.raises(ValueError):
        ledger.adjust_quantity(entry.id, delta)

    unchanged = ledger.get(entry.id)
    assert unchanged is not None
    assert unchanged.quantity == 1
    assert len(store.writes) == writes


def test_unknown_ids_are_ignored() -> None:
    store = InMemoryStateStore()
    ledger = MealLedger(slot=StateSlot(store, "ledger"))
    ledger.add(RICE, MealCategory.DINNER)
    writes = len(store.writes)

    ledger.adjust_quantity("missing", 1)
    ledger.remove("missing")

    assert len(ledger.entries) == 1
    assert len(store.writes) == writes


def test_remove_is_idempotent() -> None:
    ledger = MealLedger()
    entry = ledger.add(RICE, MealCategory.DINNER)

    ledger.remove(entry.id)
    ledger.remove(entry.id)

    assert ledger.entries == []


def test_totals_are_flat_and_per_category() -> None:
    ledger = MealLedger()
    ledger.add(EGG, MealCategory.BREAKFAST)
    rice = ledger.add(RICE, MealCategory.LUNCH)
    ledger.add(RICE, MealCategory.DINNER)
    ledger.adjust_quantity(rice.id, 1)

    subtotals = ledger.category_calories()

    assert ledger.total_calories() == pytest.approx(70 + 400 + 200)
    assert subtotals[MealCategory.BREAKFAST] == pytest.approx(70)
    assert subtotals[MealCategory.LUNCH] == pytest.approx(400)
    assert subtotals[MealCategory.DINNER] == pytest.approx(200)


def test_by_category_is_a_snapshot() -> None:
    ledger = MealLedger()
    entry = ledger.add(RICE, MealCategory.LUNCH)
    snapshot = ledger.by_category()

    ledger.adjust_quantity(entry.id, 2)
    ledger.clear()

    assert snapshot[MealCategory.LUNCH][0].quantity == 1
    assert snapshot[MealCategory.BREAKFAST] == ()


def test_mutations_rewrite_slot() -> None:
    store = InMemoryStateStore()
    ledger = MealLedger(slot=StateSlot(store, "ledger"))
    entry = ledger.add(RICE, MealCategory.LUNCH)

    ledger.adjust_quantity(entry.id, 0.5)

    assert store.data["ledger"][0]["quantity"] == 1.5
    ledger.remove(entry.id)
    assert store.data["ledger"] == []
