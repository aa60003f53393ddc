"""Domain models for user biometrics."""

from dataclasses import dataclass
from enum import StrEnum


class Gender(StrEnum):
    """Gender used for the BMR offset."""

    MALE = "male"
    FEMALE = "female"


class Goal(StrEnum):
    """Body-weight goal. Informational only."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


ACTIVITY_LEVELS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


@dataclass(frozen=True)
class BiometricProfile:
    """User stats used for energy expenditure estimates."""

    age: int | None = 30
    gender: Gender = Gender.MALE
    weight_kg: float | None = 70.0
    height_cm: float | None = 175.0
    activity_factor: float | None = ACTIVITY_LEVELS["sedentary"]
    goal: Goal = Goal.LOSE
