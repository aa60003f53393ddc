"""Store of saved days, one record per calendar date."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from calorie_tracker.domain.records import DailyRecord
from calorie_tracker.services.storage import StateSlot, encode_record


@dataclass
class DailyRecordStore:
    """Saved days kept sorted with the most recent first."""

    records: list[DailyRecord] = field(default_factory=list)
    slot: StateSlot | None = None

    @classmethod
    def from_records(
        cls, records: list[DailyRecord], slot: StateSlot | None = None
    ) -> "DailyRecordStore":
        """Build a store, keeping the last record seen for each date."""
        by_date = {record.date: record for record in records}
        return cls(records=_sorted(by_date.values()), slot=slot)

    def upsert(self, record: DailyRecord) -> None:
        """Insert a record, replacing any record for the same date."""
        remaining = [
            existing for existing in self.records if existing.date != record.date
        ]
        self.records = _sorted([*remaining, record])
        self._persist()

    def delete(self, date: str) -> None:
        """Remove the record for a date. Unknown dates are ignored."""
        remaining = [record for record in self.records if record.date != date]
        if len(remaining) == len(self.records):
            return
        self.records = remaining
        self._persist()

    def clear(self) -> None:
        """Remove every record."""
        self.records = []
        self._persist()

    def get(self, date: str) -> DailyRecord | None:
        """Return the record for a date, if present."""
        for record in self.records:
            if record.date == date:
                return record
        return None

    def all(self) -> list[DailyRecord]:
        """Return records with the most recent date first."""
        return list(self.records)

    def chronological(self, window_size: int) -> list[DailyRecord]:
        """Return the last ``window_size`` records, oldest first."""
        if window_size <= 0:
            return []
        return list(reversed(self.records[:window_size]))

    def _persist(self) -> None:
        if self.slot is not None:
            self.slot.write([encode_record(record) for record in self.records])


def _sorted(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    return sorted(records, key=lambda record: record.date, reverse=True)
