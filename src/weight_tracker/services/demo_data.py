"""Synthetic weight history for new accounts."""

import random
from datetime import date, timedelta

from weight_tracker.domain.weights import WeightEntry
from weight_tracker.services.weight_stats import round_weight

DEMO_DAYS = 30
DEMO_START_WEIGHT = 78.0
DEMO_DAILY_VARIATION = 0.6


def generate_demo_data(
    today: date,
    rng: random.Random | None = None,
    days: int = DEMO_DAYS,
    start_weight: float = DEMO_START_WEIGHT,
) -> list[WeightEntry]:
    """Return one entry per day ending today, drifting by up to ±0.3 kg."""
    source = rng or random.Random()
    weight = start_weight
    entries = []
    for offset in range(days - 1, -1, -1):
        weight += (source.random() - 0.5) * DEMO_DAILY_VARIATION
        entries.append(
            WeightEntry(
                day=today - timedelta(days=offset), weight=round_weight(weight)
            )
        )
    return entries
