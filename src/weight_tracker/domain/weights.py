"""Domain models for weight entries and derived metrics."""

from dataclasses import dataclass
from datetime import date
from typing import Literal
from uuid import UUID

BMICategory = Literal["Underweight", "Normal", "Overweight", "Obese"]


@dataclass(frozen=True)
class WeightEntry:
    """A single weight measurement for a calendar day."""

    day: date
    weight: float
    id: UUID | None = None


@dataclass(frozen=True)
class WeightStats:
    """Summary statistics over a user's entries."""

    current: float | None
    week_change: float | None
    month_change: float | None
    highest: float | None
    lowest: float | None


@dataclass(frozen=True)
class BMIResult:
    """BMI value with its category and a display color hint."""

    bmi: float
    category: BMICategory
    color: str


@dataclass(frozen=True)
class GoalProgress:
    """Progress from the starting weight towards the goal weight."""

    target_weight: float
    current_weight: float
    start_weight: float
    progress: float
    remaining: float
    days_tracked: int


@dataclass(frozen=True)
class RecordResult:
    """Outcome of recording a weight for a day."""

    entry: WeightEntry
    is_update: bool
