"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from weight_tracker.domain.profiles import UserProfile
from weight_tracker.services.profiles import ProfileRepository

_COLUMNS = "user_id, email, username, height, goal_weight"
_UPDATABLE = {"username", "height", "goal_weight"}


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_profile(self, user_id: UUID, email: str, username: str) -> UserProfile:
        """Insert a profile row."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .insert(
                {
                    "user_id": str(user_id),
                    "email": email,
                    "username": username,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile")
        return _parse_row(response.data[0])

    def update_profile(
        self, user_id: UUID, updates: dict[str, object]
    ) -> UserProfile | None:
        """Update username, height or goal weight."""
        payload = {key: value for key, value in updates.items() if key in _UPDATABLE}
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .update(payload)
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _parse_row(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=UUID(str(row["user_id"])),
        email=str(row.get("email") or ""),
        username=str(row.get("username") or ""),
        height=_optional_float(row.get("height")),
        goal_weight=_optional_float(row.get("goal_weight")),
    )
