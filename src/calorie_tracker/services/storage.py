"""Key/value persistence slots and their JSON codec."""

import logging
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.foods import (
    FoodEntry,
    LibraryItem,
    MealCategory,
    Provenance,
)
from calorie_tracker.domain.profile import BiometricProfile, Gender, Goal
from calorie_tracker.domain.records import DailyRecord

LIBRARY_SLOT = "food_library"
RECORDS_SLOT = "daily_records"
PROFILE_SLOT = "biometric_profile"
LEDGER_SLOT = "meal_ledger"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface for JSON documents."""

    def get(self, key: str) -> object | None:
        """Return the stored document for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Replace the document stored under a key."""


@dataclass
class StateSlot:
    """One persisted document, rewritten in full on every change."""

    store: KeyValueStore
    key: str

    def read(self) -> object | None:
        """Return the stored document, or None when missing or unreadable."""
        try:
            return self.store.get(self.key)
        except Exception:
            _logger.exception("Failed to read state slot %s", self.key)
            return None

    def write(self, value: object) -> None:
        """Store the document; failures keep the in-memory state authoritative."""
        try:
            self.store.set(self.key, value)
        except Exception:
            _logger.exception("Failed to persist state slot %s", self.key)


def slot_key(prefix: str, name: str) -> str:
    """Return the namespaced store key for a slot."""
    if not prefix:
        return name
    return f"{prefix}:{name}"


def encode_library_item(item: LibraryItem) -> dict[str, object]:
    return {
        "name": item.name,
        "calories_per_unit": item.calories_per_unit,
        "unit": item.unit,
    }


def decode_library_item(payload: dict[str, object]) -> LibraryItem:
    return LibraryItem(
        name=str(payload["name"]),
        calories_per_unit=float(payload["calories_per_unit"]),
        unit=str(payload.get("unit", "")),
    )


def encode_food_entry(entry: FoodEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "name": entry.name,
        "calories_per_unit": entry.calories_per_unit,
        "unit": entry.unit,
        "quantity": entry.quantity,
        "category": entry.category.value,
        "provenance": entry.provenance.value,
    }


def decode_food_entry(payload: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        id=str(payload["id"]),
        name=str(payload["name"]),
        calories_per_unit=float(payload["calories_per_unit"]),
        unit=str(payload.get("unit", "")),
        quantity=float(payload.get("quantity", 1.0)),
        category=MealCategory(payload["category"]),
        provenance=Provenance(payload.get("provenance", Provenance.USER.value)),
    )


def encode_profile(profile: BiometricProfile) -> dict[str, object]:
    return {
        "age": profile.age,
        "gender": profile.gender.value,
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "activity_factor": profile.activity_factor,
        "goal": profile.goal.value,
    }


def decode_profile(payload: dict[str, object]) -> BiometricProfile:
    return BiometricProfile(
        age=_optional_int(payload.get("age")),
        gender=Gender(payload.get("gender", Gender.MALE.value)),
        weight_kg=_optional_float(payload.get("weight_kg")),
        height_cm=_optional_float(payload.get("height_cm")),
        activity_factor=_optional_float(payload.get("activity_factor")),
        goal=Goal(payload.get("goal", Goal.LOSE.value)),
    )


def encode_record(record: DailyRecord) -> dict[str, object]:
    return {
        "date": record.date,
        "calories_intake": record.calories_intake,
        "calories_target": record.calories_target,
        "weight_kg": record.weight_kg,
        "meals": {
            category.value: [encode_food_entry(entry) for entry in entries]
            for category, entries in record.meals.items()
        },
    }


def decode_record(payload: dict[str, object]) -> DailyRecord:
    raw_meals = payload.get("meals") or {}
    meals = {
        MealCategory(category): tuple(decode_food_entry(entry) for entry in entries)
        for category, entries in raw_meals.items()
    }
    return DailyRecord(
        date=str(payload["date"]),
        calories_intake=int(payload["calories_intake"]),
        calories_target=int(payload.get("calories_target", 0)),
        weight_kg=_optional_float(payload.get("weight_kg")),
        meals=meals,
    )


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return int(value)
    return None


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    return None
