"""
Pydantic schemas for NeuroLearn progress API.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============ Profile Schemas ============


class ProfileRequest(BaseModel):
    """Create or update a profile."""

    username: str | None = None
    learning_style: str | None = None


class ProfileResponse(BaseModel):
    """Profile response (cached progress fields included)."""

    model_config = ConfigDict(from_attributes=True)

    external_id: str
    username: str | None = None
    learning_style: str | None = None

    xp: int
    level: int
    streak: int
    highest_streak: int
    last_activity_date: date | None = None


# ============ Progress Schemas ============


class LevelResponse(BaseModel):
    """Level and progress within level."""

    xp: int
    level: int
    current_level_xp: int
    next_level_xp: int
    progress: float = Field(description="current_level_xp / next_level_xp")


class StreakResponse(BaseModel):
    current_streak: int
    highest_streak: int


class ActivityDayResponse(BaseModel):
    """One bar of the activity chart."""

    day: date
    label: str  # Romanian weekday abbreviation
    count: int


class ActivityResponse(BaseModel):
    days: list[ActivityDayResponse]
    total: int


class ActivityLogResponse(BaseModel):
    """Journal entry for the "recent activity" feed."""

    model_config = ConfigDict(from_attributes=True)

    activity_type: str
    details: dict[str, Any]
    created_at: datetime


class RecentActivityResponse(BaseModel):
    items: list[ActivityLogResponse]


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    difficulty: str
    unlocked: bool
    progress: int
    max_progress: int


class ProgressResponse(BaseModel):
    """Full progress summary."""

    level: LevelResponse
    streak: StreakResponse
    activity: list[ActivityDayResponse]
    completed_lessons: int
    badges: list[BadgeResponse]


# ============ Action Schemas ============


class CompletionResponse(BaseModel):
    """Response after completing a lesson, task or goal."""

    success: bool
    xp_earned: int
    total_xp: int
    level: int
    leveled_up: bool
    current_streak: int
    highest_streak: int
    unlocked_badges: list[str]


class MethodUsageResponse(BaseModel):
    success: bool
    method: str
    count: int
    unlocked_badges: list[str]


class CacheSyncResponse(BaseModel):
    """Profile cache before/after recomputation."""

    drifted: bool
    old_level: int
    new_level: int
    old_streak: int
    new_streak: int
    old_highest_streak: int
    new_highest_streak: int


# ============ Group Schemas ============


class GroupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class GroupResponse(BaseModel):
    id: int
    name: str
    member_count: int


class LeaderboardEntryResponse(BaseModel):
    """One row of the group leaderboard, values recomputed live."""

    rank: int
    user_id: str
    name: str
    xp: int
    level: int
    streak: int
    highest_streak: int
    lessons_completed: int


class LeaderboardResponse(BaseModel):
    group_id: int
    name: str
    sort_by: str
    entries: list[LeaderboardEntryResponse]
