"""User profile service."""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from weight_tracker.domain.profiles import UserProfile
from weight_tracker.services.demo_data import generate_demo_data
from weight_tracker.services.subscriptions import (
    ChangeFeed,
    Subscription,
    profile_topic,
)
from weight_tracker.services.validation import (
    require_valid,
    validate_goal_weight,
    validate_height,
    validate_username,
)
from weight_tracker.services.weights import WeightService

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def create_profile(self, user_id: UUID, email: str, username: str) -> UserProfile:
        """Create and return a profile."""

    def update_profile(
        self, user_id: UUID, updates: dict[str, object]
    ) -> UserProfile | None:
        """Apply field updates and return the updated profile."""


@dataclass
class ProfileService:
    """Application service for profile lifecycle and settings."""

    repository: ProfileRepository
    weight_service: WeightService
    feed: ChangeFeed
    clock: Callable[[], date]
    rng: random.Random = field(default_factory=random.Random)

    def create_profile(
        self,
        user_id: UUID,
        email: str,
        username: str | None = None,
        include_demo_data: bool = False,
    ) -> UserProfile:
        """Create a profile, optionally seeding a month of demo weights."""
        resolved_username = username or email.split("@")[0]
        profile = self.repository.create_profile(user_id, email, resolved_username)
        if include_demo_data:
            self.weight_service.seed_entries(
                user_id, generate_demo_data(self.clock(), self.rng)
            )
        self._publish(profile)
        return profile

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return a user's profile."""
        return self.repository.get_profile(user_id)

    def ensure_profile(self, user_id: UUID, email: str) -> UserProfile:
        """Return the user's profile, creating a bare one if it is missing."""
        existing = self.repository.get_profile(user_id)
        if existing:
            return existing
        _logger.info("Creating missing profile: user_id=%s", user_id)
        return self.create_profile(user_id, email)

    def update(
        self,
        user_id: UUID,
        username: str | None = None,
        height: float | None = None,
        goal_weight: float | None = None,
    ) -> UserProfile | None:
        """Validate every given field, then save them together.

        Fields left as ``None`` are unchanged. Nothing is saved when any
        field is invalid.
        """
        updates: dict[str, object] = {}
        if username is not None:
            require_valid(validate_username(username))
            updates["username"] = username.strip()
        if height is not None:
            require_valid(validate_height(height))
            updates["height"] = height
        if goal_weight is not None:
            require_valid(validate_goal_weight(goal_weight))
            updates["goal_weight"] = goal_weight
        if not updates:
            return self.get_profile(user_id)
        return self._update(user_id, updates)

    def set_height(self, user_id: UUID, height: float) -> UserProfile | None:
        return self.update(user_id, height=height)

    def set_goal_weight(self, user_id: UUID, goal_weight: float) -> UserProfile | None:
        return self.update(user_id, goal_weight=goal_weight)

    def set_username(self, user_id: UUID, username: str) -> UserProfile | None:
        return self.update(user_id, username=username)

    def reset_data(self, user_id: UUID) -> UserProfile | None:
        """Delete all weights and clear height and goal weight."""
        self.weight_service.delete_all(user_id)
        _logger.info("User data reset: user_id=%s", user_id)
        return self._update(user_id, {"height": None, "goal_weight": None})

    def subscribe(
        self, user_id: UUID, callback: Callable[[UserProfile | None], None]
    ) -> Subscription:
        """Deliver the current profile now and again after every change."""
        subscription = self.feed.subscribe(profile_topic(user_id), callback)
        try:
            callback(self.repository.get_profile(user_id))
        except Exception:
            subscription.cancel()
            raise
        return subscription

    def _update(self, user_id: UUID, updates: dict[str, object]) -> UserProfile | None:
        profile = self.repository.update_profile(user_id, updates)
        if profile is not None:
            self._publish(profile)
        return profile

    def _publish(self, profile: UserProfile) -> None:
        self.feed.publish(profile_topic(profile.user_id), profile)
