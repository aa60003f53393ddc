"""BMR and TDEE calculations for the user's profile."""

import math
from dataclasses import dataclass, replace

from calorie_tracker.domain.profile import BiometricProfile, Gender, Goal
from calorie_tracker.services.storage import StateSlot, encode_profile

MALE_OFFSET = 5.0
FEMALE_OFFSET = -161.0


def compute_bmr(profile: BiometricProfile) -> float:
    """Return the Mifflin-St Jeor BMR, or 0 when a required stat is missing."""
    if not _is_positive(profile.age):
        return 0.0
    if not _is_positive(profile.weight_kg) or not _is_positive(profile.height_cm):
        return 0.0
    offset = MALE_OFFSET if profile.gender == Gender.MALE else FEMALE_OFFSET
    return (
        10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age + offset
    )


def compute_tdee(profile: BiometricProfile) -> int:
    """Return BMR scaled by the activity factor, rounded to whole kcal."""
    if not _is_positive(profile.activity_factor):
        return 0
    return round_half_up(compute_bmr(profile) * profile.activity_factor)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def _is_positive(value: float | None) -> bool:
    return value is not None and not math.isnan(value) and value > 0


@dataclass
class BiometricModel:
    """Holds the current profile and exposes derived energy values."""

    profile: BiometricProfile
    slot: StateSlot | None = None

    @property
    def bmr(self) -> float:
        """Basal metabolic rate for the current profile."""
        return compute_bmr(self.profile)

    @property
    def tdee(self) -> int:
        """Total daily energy expenditure for the current profile."""
        return compute_tdee(self.profile)

    def update(self, **changes: object) -> BiometricProfile:
        """Apply field changes to the profile and persist it.

        Raises ``ValueError`` for an unknown gender or goal and for a stat that
        is not a positive number. The current profile is kept on failure.
        """
        profile = replace(self.profile, **_validated(changes))
        self.profile = profile
        if self.slot is not None:
            self.slot.write(encode_profile(profile))
        return profile


def _validated(changes: dict[str, object]) -> dict[str, object]:
    validated = dict(changes)
    for name, value in changes.items():
        if name == "gender":
            validated[name] = Gender(value)
        elif name == "goal":
            validated[name] = Goal(value)
        elif value is not None and (
            isinstance(value, bool)
            or not isinstance(value, int | float)
            or not _is_positive(value)
            or math.isinf(value)
        ):
            raise ValueError(f"{name} must be a positive number, got {value!r}")
    return validated
