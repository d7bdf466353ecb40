"""Supabase-backed key-value store."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from supabase import Client

from calorie_companion.services.tracker import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Store keeping one row per key with a JSON value column."""

    client: Client
    table: str = "kv_store"
    _cache: dict[str, object] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str, default: object = None) -> object:
        """Return the stored value, reading the row on first access."""
        if key in self._cache:
            return self._cache[key]
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return default
        value = response.data[0].get("value")
        self._cache[key] = value
        return value

    def set(self, key: str, value: object) -> None:
        """Upsert the row for the key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
        self._cache[key] = value
