"""Single-user tracking session wiring the aggregates together."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeVar
from zoneinfo import ZoneInfo

from calorie_tracker.domain.chart import TrendChart
from calorie_tracker.domain.errors import (
    EmptyIntakeError,
    ResolutionError,
    ResolutionKind,
)
from calorie_tracker.domain.foods import FoodEntry, MealCategory, Provenance
from calorie_tracker.domain.profile import BiometricProfile
from calorie_tracker.domain.records import DailyRecord
from calorie_tracker.services.biometrics import BiometricModel, round_half_up
from calorie_tracker.services.chart import TrendChartMapper
from calorie_tracker.services.library import DEFAULT_FOODS, FoodLibrary
from calorie_tracker.services.lookup import FoodLookupService
from calorie_tracker.services.meals import MealLedger
from calorie_tracker.services.projection import EnergySummary, summarize
from calorie_tracker.services.records import DailyRecordStore
from calorie_tracker.services.storage import (
    LEDGER_SLOT,
    LIBRARY_SLOT,
    PROFILE_SLOT,
    RECORDS_SLOT,
    KeyValueStore,
    StateSlot,
    decode_food_entry,
    decode_library_item,
    decode_profile,
    decode_record,
    slot_key,
)

DEFAULT_WINDOW_SIZE = 7

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class TrackerService:
    """Owns the profile, ledger, library and history for one user."""

    biometrics: BiometricModel
    ledger: MealLedger
    library: FoodLibrary
    records: DailyRecordStore
    lookup_service: FoodLookupService | None = None
    chart_mapper: TrendChartMapper = field(default_factory=TrendChartMapper)
    timezone_name: str = "UTC"
    window_size: int = DEFAULT_WINDOW_SIZE

    @classmethod
    def load(  # noqa: PLR0913
        cls,
        store: KeyValueStore,
        *,
        key_prefix: str = "",
        lookup_service: FoodLookupService | None = None,
        chart_mapper: TrendChartMapper | None = None,
        timezone_name: str = "UTC",
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> "TrackerService":
        """Read every slot once, falling back to defaults for missing ones."""
        profile_slot = StateSlot(store, slot_key(key_prefix, PROFILE_SLOT))
        ledger_slot = StateSlot(store, slot_key(key_prefix, LEDGER_SLOT))
        library_slot = StateSlot(store, slot_key(key_prefix, LIBRARY_SLOT))
        records_slot = StateSlot(store, slot_key(key_prefix, RECORDS_SLOT))

        profile = _load_one(profile_slot, decode_profile, BiometricProfile())
        entries = _load_many(ledger_slot, decode_food_entry, [])
        items = _load_many(library_slot, decode_library_item, list(DEFAULT_FOODS))
        records = _load_many(records_slot, decode_record, [])

        return cls(
            biometrics=BiometricModel(profile=profile, slot=profile_slot),
            ledger=MealLedger(entries=entries, slot=ledger_slot),
            library=FoodLibrary.from_items(items, slot=library_slot),
            records=DailyRecordStore.from_records(records, slot=records_slot),
            lookup_service=lookup_service,
            chart_mapper=chart_mapper or TrendChartMapper(),
            timezone_name=timezone_name,
            window_size=window_size,
        )

    def today(self) -> str:
        """Return today's date key in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone_name)).date().isoformat()

    def add_food(self, name: str, category: MealCategory) -> FoodEntry | None:
        """Log a library food by exact name; None when it is unknown."""
        item = self.library.get(name)
        if item is None:
            return None
        return self.ledger.add(item, category, Provenance.USER)

    async def estimate_and_add(
        self, description: str, category: MealCategory
    ) -> FoodEntry:
        """Resolve a food through the estimate service and log it."""
        lookup_service = self.lookup_service
        if lookup_service is None:
            raise ResolutionError(
                ResolutionKind.UNAVAILABLE, "No food estimate service configured"
            )
        query = description.strip()
        item = await self.library.lookup_or_insert(
            query, lambda: lookup_service.resolve(query)
        )
        return self.ledger.add(item, category, Provenance.AI)

    def save_day(
        self, day: str | None = None, *, confirm_empty: bool = False
    ) -> DailyRecord:
        """Freeze the ledger and profile into the record for a day."""
        date_key = _normalize_date(day) if day else self.today()
        intake = self.ledger.total_calories()
        if intake == 0 and not confirm_empty:
            raise EmptyIntakeError(f"No intake logged for {date_key}")
        record = DailyRecord(
            date=date_key,
            calories_intake=round_half_up(intake),
            calories_target=self.biometrics.tdee,
            weight_kg=self.biometrics.profile.weight_kg,
            meals=self.ledger.by_category(),
        )
        self.records.upsert(record)
        _logger.info(
            "Saved day: date=%s intake=%s target=%s",
            record.date,
            record.calories_intake,
            record.calories_target,
        )
        return record

    def delete_day(self, day: str) -> str:
        """Delete the record for a day and return its normalized date key."""
        date_key = _normalize_date(day)
        self.records.delete(date_key)
        return date_key

    def summary(self) -> EnergySummary:
        """Return today's balance and weekly projection."""
        return summarize(
            intake=self.ledger.total_calories(),
            tdee=self.biometrics.tdee,
            weight_kg=self.biometrics.profile.weight_kg,
        )

    def chart(self, window_size: int | None = None) -> TrendChart | None:
        """Return the intake trend for the most recent saved days."""
        window = self.records.chronological(window_size or self.window_size)
        return self.chart_mapper.map(window, self.biometrics.tdee)


def _normalize_date(value: str) -> str:
    """Validate a YYYY-MM-DD key and return it zero-padded."""
    return date.fromisoformat(value).isoformat()


def _load_one(
    slot: StateSlot, decode: Callable[[dict[str, object]], T], default: T
) -> T:
    payload = slot.read()
    if payload is None:
        return default
    try:
        return decode(payload)
    except (KeyError, TypeError, ValueError, AttributeError):
        _logger.warning("Ignoring unreadable state slot %s", slot.key)
        return default


def _load_many(
    slot: StateSlot, decode: Callable[[dict[str, object]], T], default: list[T]
) -> list[T]:
    payload = slot.read()
    if payload is None:
        return default
    if not isinstance(payload, list):
        _logger.warning("Ignoring unreadable state slot %s", slot.key)
        return default
    try:
        return [decode(row) for row in payload]
    except (KeyError, TypeError, ValueError, AttributeError):
        _logger.warning("Ignoring unreadable state slot %s", slot.key)
        return default
