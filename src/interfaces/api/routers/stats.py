"""
Stats API router.

Endpoints:
- GET  /api/users/{user_id}/progress - Full progress summary
- GET  /api/users/{user_id}/level - XP and level
- GET  /api/users/{user_id}/streak - Current and highest streak
- GET  /api/users/{user_id}/activity - Completions per day
- GET  /api/users/{user_id}/recent-activity - Latest journal entries
- POST /api/users/{user_id}/sync - Recompute cached level/streak
"""

from fastapi import APIRouter, Depends, Query

from src.config import config
from src.core.domain.badge_rules import BadgeStatus
from src.core.domain.gamification import LevelInfo, calculate_user_level
from src.core.domain.streak_rules import ActivityDay
from src.core.use_cases.get_progress import GetProgressUseCase, weekday_label
from src.core.use_cases.progress_state import compute_streaks, progress_timezone, utc_now
from src.core.use_cases.sync_profile_cache import SyncProfileCacheUseCase
from src.database.models import Profile
from src.interfaces.api.deps import get_profile_or_404
from src.interfaces.api.schemas import (
    ActivityDayResponse,
    ActivityLogResponse,
    ActivityResponse,
    BadgeResponse,
    CacheSyncResponse,
    LevelResponse,
    ProgressResponse,
    RecentActivityResponse,
    StreakResponse,
)
from src.storage import activity_repo

router = APIRouter(prefix="/api/users", tags=["stats"])

# Chart window limit: one year (leap day included)
MAX_ACTIVITY_DAYS = 366
MAX_RECENT_ACTIVITY = 50


def _level_response(xp: int, info: LevelInfo) -> LevelResponse:
    return LevelResponse(
        xp=xp,
        level=info.level,
        current_level_xp=info.current_level_xp,
        next_level_xp=info.next_level_xp,
        progress=round(info.progress_ratio, 4),
    )


def _activity_response(days: list[ActivityDay]) -> list[ActivityDayResponse]:
    return [
        ActivityDayResponse(day=d.day, label=weekday_label(d.day), count=d.count)
        for d in days
    ]


def _badge_response(status: BadgeStatus) -> BadgeResponse:
    return BadgeResponse(
        id=status.badge.id,
        name=status.badge.name,
        description=status.badge.description,
        difficulty=status.badge.difficulty,
        unlocked=status.unlocked,
        progress=status.progress,
        max_progress=status.max_progress,
    )


@router.get("/{user_id}/progress", response_model=ProgressResponse)
async def get_progress(profile: Profile = Depends(get_profile_or_404)) -> ProgressResponse:
    """
    Get progress summary.

    Includes:
    - Level and XP within level
    - Current and highest streak
    - Activity chart for the trailing window (zero-filled)
    - Badges with progress
    """
    summary = await GetProgressUseCase().execute(profile)

    return ProgressResponse(
        level=_level_response(summary.total_xp, summary.level_info),
        streak=StreakResponse(
            current_streak=summary.streaks.current,
            highest_streak=summary.streaks.highest,
        ),
        activity=_activity_response(summary.activity),
        completed_lessons=summary.completed_lessons,
        badges=[_badge_response(s) for s in summary.badges],
    )


@router.get("/{user_id}/level", response_model=LevelResponse)
async def get_level(profile: Profile = Depends(get_profile_or_404)) -> LevelResponse:
    return _level_response(profile.xp, calculate_user_level(profile.xp, config.XP_PER_LEVEL))


@router.get("/{user_id}/streak", response_model=StreakResponse)
async def get_streak(profile: Profile = Depends(get_profile_or_404)) -> StreakResponse:
    streaks = await compute_streaks(profile, utc_now(), progress_timezone())
    return StreakResponse(current_streak=streaks.current, highest_streak=streaks.highest)


@router.get("/{user_id}/activity", response_model=ActivityResponse)
async def get_activity(
    days: int = Query(
        default=7,
        ge=1,
        le=MAX_ACTIVITY_DAYS,
        description="Trailing window in days, today included",
    ),
    profile: Profile = Depends(get_profile_or_404),
) -> ActivityResponse:
    """Completions per day. Windows outside 1..366 days are rejected with 422."""
    window = await GetProgressUseCase().activity(profile, days)
    return ActivityResponse(
        days=_activity_response(window), total=sum(d.count for d in window)
    )


@router.get("/{user_id}/recent-activity", response_model=RecentActivityResponse)
async def get_recent_activity(
    limit: int = Query(default=10, ge=1, le=MAX_RECENT_ACTIVITY),
    profile: Profile = Depends(get_profile_or_404),
) -> RecentActivityResponse:
    """Latest activity journal entries, newest first."""
    entries = await activity_repo.get_recent_activity(profile, limit)
    return RecentActivityResponse(
        items=[ActivityLogResponse.model_validate(entry) for entry in entries]
    )


@router.post("/{user_id}/sync", response_model=CacheSyncResponse)
async def sync_cache(profile: Profile = Depends(get_profile_or_404)) -> CacheSyncResponse:
    result = await SyncProfileCacheUseCase().execute(profile)
    return CacheSyncResponse(
        drifted=result.drifted,
        old_level=result.old_level,
        new_level=result.new_level,
        old_streak=result.old_streak,
        new_streak=result.new_streak,
        old_highest_streak=result.old_highest_streak,
        new_highest_streak=result.new_highest_streak,
    )
