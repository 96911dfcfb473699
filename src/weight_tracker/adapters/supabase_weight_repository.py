"""Supabase repository for weight entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from weight_tracker.domain.weights import WeightEntry
from weight_tracker.services.weights import WeightRepository

_COLUMNS = "id, date, weight"


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for weight entry persistence."""

    client: Client

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return entries for a user, newest first."""
        response = (
            self.client.table("weight_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("date", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_entry_by_date(self, user_id: UUID, day: date) -> WeightEntry | None:
        """Return the entry for a day, if present."""
        response = (
            self.client.table("weight_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_entry(self, user_id: UUID, day: date, weight: float) -> WeightEntry:
        """Insert a new entry."""
        response = (
            self.client.table("weight_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": day.isoformat(),
                    "weight": weight,
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight entry")
        return _parse_row(response.data[0])

    def create_entries(self, user_id: UUID, entries: list[WeightEntry]) -> None:
        """Insert several entries in one request."""
        now = datetime.now(tz=UTC).isoformat()
        self.client.table("weight_entries").insert(
            [
                {
                    "user_id": str(user_id),
                    "date": entry.day.isoformat(),
                    "weight": entry.weight,
                    "created_at": now,
                }
                for entry in entries
            ]
        ).execute()

    def update_entry(
        self, user_id: UUID, entry_id: UUID, day: date, weight: float
    ) -> WeightEntry | None:
        """Update an entry owned by the user."""
        response = (
            self.client.table("weight_entries")
            .update(
                {
                    "date": day.isoformat(),
                    "weight": weight,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user."""
        response = (
            self.client.table("weight_entries")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def delete_all_entries(self, user_id: UUID) -> None:
        """Delete all entries owned by the user."""
        self.client.table("weight_entries").delete().eq(
            "user_id", str(user_id)
        ).execute()


def _parse_row(row: dict[str, object]) -> WeightEntry:
    raw_id = row.get("id")
    return WeightEntry(
        id=UUID(str(raw_id)) if raw_id else None,
        day=date.fromisoformat(str(row["date"])[:10]),
        weight=float(row.get("weight", 0.0)),
    )
