"""Tests for the dashboard service."""

from datetime import date
from uuid import uuid4

import pytest

from tests.conftest import TODAY
from weight_tracker.domain.weights import WeightEntry
from weight_tracker.services.dashboard import DashboardService, local_clock
from weight_tracker.services.profiles import ProfileService
from weight_tracker.services.validation import InvalidInputError
from weight_tracker.services.weights import WeightService


def _dashboard(
    weight_service: WeightService, profile_service: ProfileService
) -> DashboardService:
    return DashboardService(
        weight_service=weight_service,
        profile_service=profile_service,
        clock=lambda: TODAY,
    )


def test_build_combines_stats_bmi_and_goal(
    weight_service: WeightService, profile_service: ProfileService
) -> None:
    user_id = uuid4()
    profile_service.create_profile(user_id, "ana@example.com", "ana")
    profile_service.set_height(user_id, 175)
    profile_service.set_goal_weight(user_id, 70)
    for day, weight in (("2024-01-01", 80), ("2024-01-15", 78), ("2024-01-30", 76)):
        weight_service.record_weight(user_id, date.fromisoformat(day), weight)

    dashboard = _dashboard(weight_service, profile_service).build(user_id)

    assert dashboard.stats.current == 76
    assert dashboard.stats.week_change == -2.0
    assert dashboard.bmi.bmi == 24.8
    assert dashboard.bmi.category == "Normal"
    assert dashboard.goal is not None
    assert dashboard.goal.progress == 40.0
    assert len(dashboard.entries) == 2


def test_build_uses_explicit_range_when_given(
    weight_service: WeightService, profile_service: ProfileService
) -> None:
    user_id = uuid4()
    for day, weight in (("2024-01-01", 80), ("2024-01-15", 78), ("2024-01-30", 76)):
        weight_service.record_weight(user_id, date.fromisoformat(day), weight)

    dashboard = _dashboard(weight_service, profile_service).build(
        user_id, start=date(2024, 1, 1), end=date(2024, 1, 15)
    )

    assert sorted(item.weight for item in dashboard.entries) == [78, 80]
    assert dashboard.stats.highest == 80


def test_build_without_profile_or_entries_uses_sentinels(
    weight_service: WeightService, profile_service: ProfileService
) -> None:
    dashboard = _dashboard(weight_service, profile_service).build(uuid4(), days=7)

    assert dashboard.entries == []
    assert dashboard.stats.current is None
    assert dashboard.bmi.bmi == 0
    assert dashboard.bmi.category == "Normal"
    assert dashboard.goal is None


def test_local_clock_returns_a_date() -> None:
    today = local_clock("Pacific/Auckland")()

    assert isinstance(today, date)


@pytest.mark.parametrize(
    ("start", "end"), [(date(2024, 1, 1), None), (None, date(2024, 1, 31))]
)
def test_filter_entries_requires_both_range_bounds(
    weight_service: WeightService,
    profile_service: ProfileService,
    start: date | None,
    end: date | None,
) -> None:
    dashboard = _dashboard(weight_service, profile_service)

    with pytest.raises(InvalidInputError):
        dashboard.filter_entries([], start=start, end=end)


def test_filter_entries_zero_days_is_empty(
    weight_service: WeightService, profile_service: ProfileService
) -> None:
    entries = [WeightEntry(day=TODAY, weight=76)]

    assert _dashboard(weight_service, profile_service).filter_entries(entries, 0) == []
