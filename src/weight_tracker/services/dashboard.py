"""Dashboard service combining stats, BMI and goal progress."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from weight_tracker.domain.weights import (
    BMIResult,
    GoalProgress,
    WeightEntry,
    WeightStats,
)
from weight_tracker.services.bmi import calculate_bmi, get_bmi_category
from weight_tracker.services.profiles import ProfileService
from weight_tracker.services.validation import InvalidInputError
from weight_tracker.services.weight_stats import (
    calculate_goal_progress,
    calculate_weight_stats,
    filter_weights_by_date_range,
    filter_weights_by_days,
)
from weight_tracker.services.weights import WeightService

DEFAULT_WINDOW_DAYS = 30


def local_clock(timezone_name: str) -> Callable[[], date]:
    """Return a callable yielding today's date in a timezone."""
    tz = ZoneInfo(timezone_name)

    def today() -> date:
        return datetime.now(tz=tz).date()

    return today


@dataclass
class Dashboard:
    """Everything a dashboard view needs for one user."""

    entries: list[WeightEntry]
    stats: WeightStats
    bmi: BMIResult
    goal: GoalProgress | None


@dataclass
class DashboardService:
    """Service for computing a user's dashboard."""

    weight_service: WeightService
    profile_service: ProfileService
    clock: Callable[[], date]

    def filter_entries(
        self,
        entries: list[WeightEntry],
        days: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[WeightEntry]:
        """Narrow entries to an explicit range, or to a day window.

        A range needs both bounds. A non-positive ``days`` matches nothing.
        """
        if (start is None) != (end is None):
            raise InvalidInputError("Both start and end dates are required")
        if start is not None and end is not None:
            return filter_weights_by_date_range(entries, start, end)
        window = DEFAULT_WINDOW_DAYS if days is None else days
        return filter_weights_by_days(entries, window, today=self.clock())

    def build(
        self,
        user_id: UUID,
        days: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Dashboard:
        """Return stats over all entries plus the entries in the window."""
        entries = self.weight_service.list_entries(user_id)
        profile = self.profile_service.get_profile(user_id)
        height = profile.height if profile else None
        goal_weight = profile.goal_weight if profile else None

        stats = calculate_weight_stats(entries, today=self.clock())
        bmi = get_bmi_category(calculate_bmi(height, stats.current))
        goal = calculate_goal_progress(stats.current, goal_weight, entries)
        return Dashboard(
            entries=self.filter_entries(entries, days, start, end),
            stats=stats,
            bmi=bmi,
            goal=goal,
        )
