"""
Get Progress Use Case - сводка прогресса для страницы "Progres".

AICODE-NOTE: Сводка всегда считается заново из XP и событий завершения,
кэшированные level/streak профиля не читаются.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from src.config import config
from src.core.domain.badge_rules import BadgeStatus, evaluate_badges
from src.core.domain.gamification import LevelInfo, calculate_user_level
from src.core.domain.streak_rules import (
    ActivityDay,
    StreakSummary,
    activity_histogram,
    fill_activity_window,
    summarize_streaks,
    window_bounds,
)
from src.core.use_cases.progress_state import ProgressState, progress_timezone, utc_now
from src.database.models import Profile
from src.storage import completion_repo, lesson_repo, method_usage_repo

# date.weekday(): 0 = luni
RO_WEEKDAYS = ("lun", "mar", "mie", "joi", "vin", "sâm", "dum")


def weekday_label(day: date) -> str:
    return RO_WEEKDAYS[day.weekday()]


@dataclass
class ProgressSummary:
    """Всё, что нужно странице прогресса."""

    total_xp: int
    level_info: LevelInfo
    streaks: StreakSummary
    activity: list[ActivityDay]
    completed_lessons: int
    badges: list[BadgeStatus]


def window_start(now: datetime, window_days: int, tz: tzinfo) -> Optional[datetime]:
    """
    Начало первого дня окна (полночь в tz), в UTC.

    None, если окно начинается с date.min: нижняя граница не нужна.
    """
    first_day, _ = window_bounds(now, window_days, tz)
    if first_day == date.min:
        return None
    return datetime.combine(first_day, time.min, tzinfo=tz).astimezone(timezone.utc)


class GetProgressUseCase:
    """Use-case для сводки прогресса."""

    async def execute(
        self, profile: Profile, now: Optional[datetime] = None
    ) -> ProgressSummary:
        if now is None:
            now = utc_now()
        tz = progress_timezone()
        window_days = config.ACTIVITY_WINDOW_DAYS

        timestamps = await completion_repo.get_completion_timestamps(
            profile, kind=config.STREAK_ACTIVITY_KIND
        )
        histogram = activity_histogram(timestamps, now, window_days, tz)

        state = ProgressState(
            level_info=calculate_user_level(profile.xp, config.XP_PER_LEVEL),
            streaks=summarize_streaks(timestamps, now, tz),
            completed_lessons=await lesson_repo.count_completed(profile),
            method_usage=await method_usage_repo.get_usage_map(profile),
        )

        return ProgressSummary(
            total_xp=profile.xp,
            level_info=state.level_info,
            streaks=state.streaks,
            activity=fill_activity_window(histogram, now, window_days, tz),
            completed_lessons=state.completed_lessons,
            badges=evaluate_badges(state.snapshot(profile.xp)),
        )

    async def activity(
        self, profile: Profile, window_days: int, now: Optional[datetime] = None
    ) -> list[ActivityDay]:
        """Гистограмма за окно произвольной длины, с нулями."""
        if now is None:
            now = utc_now()
        tz = progress_timezone()

        timestamps = await completion_repo.get_completion_timestamps(
            profile,
            kind=config.STREAK_ACTIVITY_KIND,
            since=window_start(now, window_days, tz),
        )
        histogram = activity_histogram(timestamps, now, window_days, tz)
        return fill_activity_window(histogram, now, window_days, tz)
