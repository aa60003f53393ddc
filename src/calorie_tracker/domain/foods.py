"""Domain models for foods and meal entries."""

from dataclasses import dataclass
from enum import StrEnum


class MealCategory(StrEnum):
    """Meal a food entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class Provenance(StrEnum):
    """Where a calorie value came from."""

    USER = "user"
    AI = "ai"


@dataclass(frozen=True)
class LibraryItem:
    """Resolved food known to the library."""

    name: str
    calories_per_unit: float
    unit: str


@dataclass(frozen=True)
class FoodEntry:
    """Food logged for the day in progress."""

    id: str
    name: str
    calories_per_unit: float
    unit: str
    quantity: float
    category: MealCategory
    provenance: Provenance

    @property
    def calories(self) -> float:
        """Calories for the logged quantity."""
        return self.calories_per_unit * self.quantity
