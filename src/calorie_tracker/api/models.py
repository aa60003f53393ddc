"""Pydantic models for API payloads."""

from pydantic import BaseModel, Field

from calorie_tracker.domain.foods import MealCategory
from calorie_tracker.domain.profile import Gender, Goal
from calorie_tracker.services.meals import QUANTITY_STEP


class ProfileUpdate(BaseModel):
    """Partial update of the biometric profile."""

    age: int | None = Field(default=None, gt=0)
    gender: Gender | None = None
    weight_kg: float | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    activity_factor: float | None = Field(default=None, gt=0)
    goal: Goal | None = None


class AddFoodRequest(BaseModel):
    """Log a library food by name."""

    name: str = Field(min_length=1)
    category: MealCategory = MealCategory.LUNCH


class EstimateFoodRequest(BaseModel):
    """Estimate a food from a free-text description and log it."""

    description: str = Field(min_length=1)
    category: MealCategory = MealCategory.LUNCH


class QuantityChange(BaseModel):
    """Relative quantity change for a logged food."""

    delta: float = Field(
        default=QUANTITY_STEP, multiple_of=QUANTITY_STEP, allow_inf_nan=False
    )


class ManualFoodRequest(BaseModel):
    """User-entered library food."""

    name: str = Field(min_length=1)
    calories_per_unit: float = Field(ge=0)
    unit: str = Field(min_length=1)


class SaveDayRequest(BaseModel):
    """Save the ledger as the record for a day."""

    date: str | None = None
    confirm_empty: bool = False
