"""Models for food estimate payloads."""

from pydantic import BaseModel, ConfigDict, Field


class FoodEstimate(BaseModel):
    """Structured output of a food estimate."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    calories: float = Field(ge=0.0, strict=True, allow_inf_nan=False)
