"""Supabase implementation of the key/value state store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_tracker.services.storage import KeyValueStore


@dataclass
class SupabaseStateStore(KeyValueStore):
    """Stores each state slot as one JSON row."""

    client: Client
    table: str = "tracker_state"

    def get(self, key: str) -> object | None:
        """Return the stored document for a key, if present."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: object) -> None:
        """Insert or replace the document for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
