"""Meal ledger for the day being edited."""

import math
from dataclasses import dataclass, field, replace
from uuid import uuid4

from calorie_tracker.domain.foods import (
    FoodEntry,
    LibraryItem,
    MealCategory,
    Provenance,
)
from calorie_tracker.services.storage import StateSlot, encode_food_entry

MIN_QUANTITY = 0.5
QUANTITY_STEP = 0.5


@dataclass
class MealLedger:
    """In-memory food entries for the current day, grouped by meal."""

    entries: list[FoodEntry] = field(default_factory=list)
    slot: StateSlot | None = None

    def add(
        self,
        item: LibraryItem,
        category: MealCategory,
        provenance: Provenance = Provenance.USER,
    ) -> FoodEntry:
        """Log one unit of a library item under a meal."""
        entry = FoodEntry(
            id=uuid4().hex,
            name=item.name,
            calories_per_unit=item.calories_per_unit,
            unit=item.unit,
            quantity=1.0,
            category=category,
            provenance=provenance,
        )
        self.entries.append(entry)
        self._persist()
        return entry

    def adjust_quantity(self, entry_id: str, delta: float) -> None:
        """Change an entry's quantity, never going below the minimum step.

        Unknown ids are ignored. A delta that is not a whole number of steps
        raises ``ValueError``.
        """
        if not _is_step_multiple(delta):
            raise ValueError(f"Quantity change must be a multiple of {QUANTITY_STEP}")
        for index, entry in enumerate(self.entries):
            if entry.id != entry_id:
                continue
            quantity = max(MIN_QUANTITY, entry.quantity + delta)
            self.entries[index] = replace(entry, quantity=quantity)
            self._persist()
            return

    def remove(self, entry_id: str) -> None:
        """Delete an entry by id. Unknown ids are ignored."""
        remaining = [entry for entry in self.entries if entry.id != entry_id]
        if len(remaining) == len(self.entries):
            return
        self.entries = remaining
        self._persist()

    def clear(self) -> None:
        """Drop every entry to start a new day."""
        self.entries = []
        self._persist()

    def get(self, entry_id: str) -> FoodEntry | None:
        """Return an entry by id, if present."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def total_calories(self) -> float:
        """Return calories across every meal."""
        return sum(entry.calories for entry in self.entries)

    def category_calories(self) -> dict[MealCategory, float]:
        """Return calorie subtotals per meal."""
        totals = {category: 0.0 for category in MealCategory}
        for entry in self.entries:
            totals[entry.category] += entry.calories
        return totals

    def by_category(self) -> dict[MealCategory, tuple[FoodEntry, ...]]:
        """Return an immutable snapshot of entries partitioned by meal."""
        return {
            category: tuple(
                entry for entry in self.entries if entry.category == category
            )
            for category in MealCategory
        }

    def _persist(self) -> None:
        if self.slot is not None:
            self.slot.write([encode_food_entry(entry) for entry in self.entries])


def _is_step_multiple(delta: float) -> bool:
    if isinstance(delta, bool) or not math.isfinite(delta):
        return False
    return (delta / QUANTITY_STEP).is_integer()
