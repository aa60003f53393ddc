"""Domain models for saved days."""

from dataclasses import dataclass, field

from calorie_tracker.domain.foods import FoodEntry, MealCategory


@dataclass(frozen=True)
class DailyRecord:
    """Finalized intake for one calendar day."""

    date: str
    calories_intake: int
    calories_target: int
    weight_kg: float | None = None
    meals: dict[MealCategory, tuple[FoodEntry, ...]] = field(default_factory=dict)
