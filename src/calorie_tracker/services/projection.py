"""Energy balance and short-term weight projection."""

from dataclasses import dataclass

KCAL_PER_KG = 7700.0
PROJECTION_DAYS = 7


@dataclass(frozen=True)
class EnergySummary:
    """Intake against expenditure with a weekly projection."""

    intake: float
    tdee: int
    daily_balance: float
    percent_of_target: float
    projection_days: int
    projected_change_kg: float
    projected_weight_kg: float | None

    @property
    def direction(self) -> str:
        """Return surplus, deficit or balanced."""
        if self.daily_balance > 0:
            return "surplus"
        if self.daily_balance < 0:
            return "deficit"
        return "balanced"


def daily_balance(intake: float, tdee: float) -> float:
    """Return intake minus expenditure; positive means surplus."""
    return intake - tdee


def projected_weight_change_kg(balance: float, days: int = PROJECTION_DAYS) -> float:
    """Return the linear weight change for a constant daily balance."""
    return (balance * days) / KCAL_PER_KG


def projected_weight_kg(current_weight: float, change: float) -> float:
    """Return the weight after applying a projected change."""
    return current_weight + change


def percent_of_target(intake: float, tdee: float) -> float:
    """Return intake as a percentage of TDEE, or 0 without a target."""
    if tdee <= 0:
        return 0.0
    return intake / tdee * 100


def summarize(
    intake: float,
    tdee: int,
    weight_kg: float | None,
    days: int = PROJECTION_DAYS,
) -> EnergySummary:
    """Combine the balance and projection for the current day."""
    balance = daily_balance(intake, tdee)
    change = projected_weight_change_kg(balance, days)
    return EnergySummary(
        intake=intake,
        tdee=tdee,
        daily_balance=balance,
        percent_of_target=percent_of_target(intake, tdee),
        projection_days=days,
        projected_change_kg=change,
        projected_weight_kg=(
            projected_weight_kg(weight_kg, change) if weight_kg is not None else None
        ),
    )
