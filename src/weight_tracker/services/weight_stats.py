"""Statistics, goal progress and window filters over weight entries.

All functions here are pure: they take a snapshot of entries and return a
freshly computed value. Entries may arrive in any order. When two entries
share a date, the one appearing later in the input wins for "as of" lookups,
and the one appearing first is used as the starting weight.
"""

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from weight_tracker.domain.weights import GoalProgress, WeightEntry, WeightStats

WEEK_DAYS = 7
MONTH_DAYS = 30
_ONE_DECIMAL = Decimal("0.1")


def round_weight(value: float) -> float:
    """Round to one decimal place, exact ties away from zero."""
    rounded = Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    # Adding 0.0 turns -0.0 into 0.0.
    return float(rounded) + 0.0


def _by_day(entries: Sequence[WeightEntry]) -> list[WeightEntry]:
    return sorted(entries, key=lambda entry: entry.day)


def get_weight_at_date(
    entries: Sequence[WeightEntry], target_date: date
) -> float | None:
    """Return the weight as of a day.

    Falls back to the oldest known weight when every entry is dated after
    ``target_date``.
    """
    if not entries:
        return None
    ordered = _by_day(entries)
    for entry in reversed(ordered):
        if entry.day <= target_date:
            return entry.weight
    return ordered[0].weight


def get_current_weight(entries: Sequence[WeightEntry]) -> float | None:
    """Return the weight of the most recently dated entry."""
    if not entries:
        return None
    return _by_day(entries)[-1].weight


def get_highest_lowest(
    entries: Sequence[WeightEntry],
) -> tuple[float | None, float | None]:
    """Return the highest and lowest recorded weights."""
    if not entries:
        return None, None
    values = [entry.weight for entry in entries]
    return max(values), min(values)


def calculate_weight_change(
    entries: Sequence[WeightEntry], days_ago: int, today: date | None = None
) -> float | None:
    """Return the change between the current weight and the weight days ago."""
    current = get_current_weight(entries)
    if current is None:
        return None
    reference_day = (today or date.today()) - timedelta(days=days_ago)
    past = get_weight_at_date(entries, reference_day)
    if past is None:
        return None
    return round_weight(current - past)


def calculate_weekly_change(
    entries: Sequence[WeightEntry], today: date | None = None
) -> float | None:
    return calculate_weight_change(entries, WEEK_DAYS, today)


def calculate_monthly_change(
    entries: Sequence[WeightEntry], today: date | None = None
) -> float | None:
    return calculate_weight_change(entries, MONTH_DAYS, today)


def calculate_weight_stats(
    entries: Sequence[WeightEntry], today: date | None = None
) -> WeightStats:
    """Compute current weight, week/month change and extremes."""
    resolved_today = today or date.today()
    highest, lowest = get_highest_lowest(entries)
    return WeightStats(
        current=get_current_weight(entries),
        week_change=calculate_weekly_change(entries, resolved_today),
        month_change=calculate_monthly_change(entries, resolved_today),
        highest=highest,
        lowest=lowest,
    )


def filter_weights_by_date_range(
    entries: Sequence[WeightEntry], start: date, end: date
) -> list[WeightEntry]:
    """Return entries dated between ``start`` and ``end`` inclusive."""
    return [entry for entry in entries if start <= entry.day <= end]


def filter_weights_by_days(
    entries: Sequence[WeightEntry], days: int, today: date | None = None
) -> list[WeightEntry]:
    """Return entries within the last ``days`` days, today included."""
    end = today or date.today()
    start = end - timedelta(days=days - 1)
    return filter_weights_by_date_range(entries, start, end)


def calculate_goal_progress(
    current_weight: float | None,
    goal_weight: float | None,
    entries: Sequence[WeightEntry],
) -> GoalProgress | None:
    """Return progress from the first recorded weight towards the goal."""
    if not current_weight or not goal_weight or not entries:
        return None

    ordered = _by_day(entries)
    start_weight = ordered[0].weight
    total_change = start_weight - goal_weight
    current_change = start_weight - current_weight
    # Goal equal to the starting weight has no distance to cover.
    if total_change != 0:
        progress = min(max(current_change / total_change * 100, 0.0), 100.0)
    else:
        progress = 0.0

    days_tracked = (ordered[-1].day - ordered[0].day).days + 1
    return GoalProgress(
        target_weight=goal_weight,
        current_weight=current_weight,
        start_weight=start_weight,
        progress=round_weight(progress),
        remaining=round_weight(current_weight - goal_weight),
        days_tracked=days_tracked,
    )


def format_weight_change(change: float | None) -> str:
    """Format a change with an explicit sign, or ``-`` when unknown."""
    if change is None:
        return "-"
    sign = "+" if change > 0 else ""
    return f"{sign}{round_weight(change):.1f}"
