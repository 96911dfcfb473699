"""Domain models for user profiles."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserProfile:
    """Represents a user's profile stored in the database."""

    user_id: UUID
    email: str
    username: str
    height: float | None = None
    goal_weight: float | None = None
