"""Weight entry service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from weight_tracker.domain.weights import RecordResult, WeightEntry
from weight_tracker.services.subscriptions import (
    ChangeFeed,
    Subscription,
    weights_topic,
)
from weight_tracker.services.validation import (
    InvalidInputError,
    require_valid,
    validate_weight,
)

_logger = logging.getLogger(__name__)


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return all entries for a user, newest first."""

    def get_entry_by_date(self, user_id: UUID, day: date) -> WeightEntry | None:
        """Return the entry recorded on a day, if present."""

    def create_entry(self, user_id: UUID, day: date, weight: float) -> WeightEntry:
        """Create an entry and return it."""

    def create_entries(self, user_id: UUID, entries: list[WeightEntry]) -> None:
        """Create several entries in one request."""

    def update_entry(
        self, user_id: UUID, entry_id: UUID, day: date, weight: float
    ) -> WeightEntry | None:
        """Update an entry and return it, or None when it does not exist."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry and return True when a row was removed."""

    def delete_all_entries(self, user_id: UUID) -> None:
        """Delete every entry for a user."""


@dataclass
class WeightService:
    """Application service for recording and editing weights."""

    repository: WeightRepository
    feed: ChangeFeed

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return all entries for a user."""
        return self.repository.list_entries(user_id)

    def record_weight(self, user_id: UUID, day: date, weight: float) -> RecordResult:
        """Record a weight for a day, replacing any entry already on that day."""
        require_valid(validate_weight(weight))
        existing = self.repository.get_entry_by_date(user_id, day)
        if existing and existing.id is not None:
            updated = self.repository.update_entry(user_id, existing.id, day, weight)
            if updated is not None:
                _logger.info("Weight updated: user_id=%s day=%s", user_id, day)
                self._publish(user_id)
                return RecordResult(entry=updated, is_update=True)

        created = self.repository.create_entry(user_id, day, weight)
        _logger.info("Weight recorded: user_id=%s day=%s", user_id, day)
        self._publish(user_id)
        return RecordResult(entry=created, is_update=False)

    def update_entry(
        self, user_id: UUID, entry_id: UUID, day: date, weight: float
    ) -> WeightEntry | None:
        """Edit an existing entry's date and weight."""
        require_valid(validate_weight(weight))
        clash = self.repository.get_entry_by_date(user_id, day)
        if clash and clash.id != entry_id:
            raise InvalidInputError(f"An entry already exists for {day.isoformat()}")
        updated = self.repository.update_entry(user_id, entry_id, day, weight)
        if updated is not None:
            self._publish(user_id)
        return updated

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry."""
        deleted = self.repository.delete_entry(user_id, entry_id)
        if deleted:
            self._publish(user_id)
        return deleted

    def seed_entries(self, user_id: UUID, entries: list[WeightEntry]) -> None:
        """Bulk insert entries, used for demo data."""
        if not entries:
            return
        self.repository.create_entries(user_id, entries)
        _logger.info("Seeded entries: user_id=%s count=%s", user_id, len(entries))
        self._publish(user_id)

    def delete_all(self, user_id: UUID) -> None:
        """Delete every entry for a user."""
        self.repository.delete_all_entries(user_id)
        self._publish(user_id)

    def subscribe(
        self, user_id: UUID, callback: Callable[[list[WeightEntry]], None]
    ) -> Subscription:
        """Deliver the current entries now and again after every change."""
        subscription = self.feed.subscribe(weights_topic(user_id), callback)
        try:
            callback(self.repository.list_entries(user_id))
        except Exception:
            subscription.cancel()
            raise
        return subscription

    def _publish(self, user_id: UUID) -> None:
        topic = weights_topic(user_id)
        if self.feed.listener_count(topic) == 0:
            return
        self.feed.publish(topic, self.repository.list_entries(user_id))
