"""Pydantic models for the HTTP API."""

from datetime import date as Date
from uuid import UUID

from pydantic import BaseModel, Field

from weight_tracker.domain.profiles import UserProfile
from weight_tracker.domain.weights import (
    BMIResult,
    GoalProgress,
    WeightEntry,
    WeightStats,
)
from weight_tracker.services.weight_stats import format_weight_change


class SignupRequest(BaseModel):
    """Sign up payload."""

    email: str
    password: str
    username: str
    include_demo_data: bool | None = None
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(BaseModel):
    """Login payload."""

    email: str
    password: str


class PasswordUpdateRequest(BaseModel):
    """Password change payload."""

    current_password: str
    new_password: str


class PasswordResetRequest(BaseModel):
    """Password reset payload."""

    email: str


class AuthResponse(BaseModel):
    """Result of an auth action."""

    success: bool
    message: str
    access_token: str | None = None
    refresh_token: str | None = None
    user_id: UUID | None = None


class WeightEntryIn(BaseModel):
    """Weight entry payload."""

    date: Date
    weight: float


class WeightEntryOut(BaseModel):
    """Weight entry as returned by the API."""

    id: UUID | None
    date: Date
    weight: float

    @classmethod
    def from_domain(cls, entry: WeightEntry) -> "WeightEntryOut":
        return cls(id=entry.id, date=entry.day, weight=entry.weight)


class RecordResponse(BaseModel):
    """Result of recording a weight."""

    entry: WeightEntryOut
    is_update: bool


class ProfileUpdateRequest(BaseModel):
    """Profile fields to change; omitted fields are left as they are."""

    username: str | None = None
    height: float | None = None
    goal_weight: float | None = None


class ProfileOut(BaseModel):
    """User profile as returned by the API."""

    user_id: UUID
    email: str
    username: str
    height: float | None = None
    goal_weight: float | None = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileOut":
        return cls(
            user_id=profile.user_id,
            email=profile.email,
            username=profile.username,
            height=profile.height,
            goal_weight=profile.goal_weight,
        )


class StatsOut(BaseModel):
    """Weight statistics with display strings for the changes."""

    current: float | None
    week_change: float | None
    month_change: float | None
    highest: float | None
    lowest: float | None
    week_change_text: str
    month_change_text: str

    @classmethod
    def from_domain(cls, stats: WeightStats) -> "StatsOut":
        return cls(
            current=stats.current,
            week_change=stats.week_change,
            month_change=stats.month_change,
            highest=stats.highest,
            lowest=stats.lowest,
            week_change_text=format_weight_change(stats.week_change),
            month_change_text=format_weight_change(stats.month_change),
        )


class BMIOut(BaseModel):
    """BMI value and category."""

    bmi: float
    category: str
    color: str

    @classmethod
    def from_domain(cls, result: BMIResult) -> "BMIOut":
        return cls(bmi=result.bmi, category=result.category, color=result.color)


class GoalOut(BaseModel):
    """Goal progress."""

    target_weight: float
    current_weight: float
    start_weight: float
    progress: float
    remaining: float
    days_tracked: int = Field(ge=1)

    @classmethod
    def from_domain(cls, goal: GoalProgress) -> "GoalOut":
        return cls(
            target_weight=goal.target_weight,
            current_weight=goal.current_weight,
            start_weight=goal.start_weight,
            progress=goal.progress,
            remaining=goal.remaining,
            days_tracked=goal.days_tracked,
        )


class DashboardOut(BaseModel):
    """Dashboard payload."""

    entries: list[WeightEntryOut]
    stats: StatsOut
    bmi: BMIOut
    goal: GoalOut | None
