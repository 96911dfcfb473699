"""In-process change feed delivering full snapshots to subscribers."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

_logger = logging.getLogger(__name__)

Listener = Callable[[object], None]


def weights_topic(user_id: UUID) -> str:
    return f"weights:{user_id}"


def profile_topic(user_id: UUID) -> str:
    return f"profile:{user_id}"


@dataclass
class Subscription:
    """Handle returned by ``ChangeFeed.subscribe``; cancel on teardown."""

    _cancel: Callable[[], None]
    active: bool = True

    def cancel(self) -> None:
        """Stop receiving snapshots. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._cancel()


@dataclass
class ChangeFeed:
    """Topic-based observer registry."""

    _listeners: dict[str, list[Listener]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def subscribe(self, topic: str, listener: Listener) -> Subscription:
        """Register a listener for a topic."""
        with self._lock:
            self._listeners.setdefault(topic, []).append(listener)

        def cancel() -> None:
            with self._lock:
                listeners = self._listeners.get(topic, [])
                if listener in listeners:
                    listeners.remove(listener)
                if not listeners:
                    self._listeners.pop(topic, None)

        return Subscription(cancel)

    def publish(self, topic: str, snapshot: object) -> None:
        """Deliver a snapshot to every listener of a topic."""
        with self._lock:
            listeners = list(self._listeners.get(topic, []))
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                _logger.exception("Change feed listener failed: topic=%s", topic)

    def listener_count(self, topic: str) -> int:
        with self._lock:
            return len(self._listeners.get(topic, []))
