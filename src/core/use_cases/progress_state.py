"""
Progress State - общие шаги use-case'ов: снимок прогресса, кэш, значки.

AICODE-NOTE: Всегда пересчитываем из сырых данных (xp + завершения).
Кэш в Profile только записывается, для расчётов не читается.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo

from src.config import config
from src.core.domain.badge_rules import ProgressSnapshot, newly_unlocked
from src.core.domain.day_boundary import resolve_timezone
from src.core.domain.gamification import LevelInfo, calculate_user_level
from src.core.domain.streak_rules import StreakSummary, summarize_streaks
from src.database.models import Profile
from src.storage import (
    badge_repo,
    completion_repo,
    lesson_repo,
    method_usage_repo,
    profile_repo,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def progress_timezone() -> tzinfo:
    """Часовой пояс границы дня из конфигурации."""
    return resolve_timezone(config.PROGRESS_TIMEZONE)


@dataclass
class ProgressState:
    """Пересчитанные значения прогресса пользователя."""

    level_info: LevelInfo
    streaks: StreakSummary
    completed_lessons: int
    method_usage: dict[str, int]

    def snapshot(self, total_xp: int) -> ProgressSnapshot:
        return ProgressSnapshot(
            completed_lessons=self.completed_lessons,
            current_streak=self.streaks.current,
            highest_streak=self.streaks.highest,
            level=self.level_info.level,
            total_xp=total_xp,
            method_usage=self.method_usage,
        )


@dataclass
class CompletionResult:
    """Результат завершения урока/задачи/цели."""

    success: bool
    xp_earned: int = 0
    total_xp: int = 0
    level: int = 1
    leveled_up: bool = False
    current_streak: int = 0
    highest_streak: int = 0
    unlocked_badges: list[str] = field(default_factory=list)
    error_message: str = ""


async def compute_streaks(profile: Profile, now: datetime, tz: tzinfo) -> StreakSummary:
    timestamps = await completion_repo.get_completion_timestamps(
        profile, kind=config.STREAK_ACTIVITY_KIND
    )
    return summarize_streaks(timestamps, now, tz)


async def load_progress_state(profile: Profile, now: datetime, tz: tzinfo) -> ProgressState:
    return ProgressState(
        level_info=calculate_user_level(profile.xp, config.XP_PER_LEVEL),
        streaks=await compute_streaks(profile, now, tz),
        completed_lessons=await lesson_repo.count_completed(profile),
        method_usage=await method_usage_repo.get_usage_map(profile),
    )


async def refresh_profile_cache(profile: Profile, state: ProgressState) -> Profile:
    """Записать level/streak в денормализованный кэш профиля."""
    return await profile_repo.save_cache(
        profile,
        level=state.level_info.level,
        streak=state.streaks.current,
        highest_streak=state.streaks.highest,
    )


async def award_new_badges(profile: Profile, state: ProgressState, now: datetime) -> list[str]:
    """
    Выдать значки, условия которых выполнены.

    Ошибка выдачи не должна ломать основной сценарий: логируем и
    возвращаем то, что успели выдать.
    """
    awarded: list[str] = []
    try:
        earned = await badge_repo.get_earned_badge_ids(profile)
        for badge in newly_unlocked(state.snapshot(profile.xp), earned):
            await badge_repo.award_badge(profile, badge.id, now)
            awarded.append(badge.id)
            logger.info(f"Badge '{badge.id}' unlocked by profile {profile.external_id}")
    except Exception as e:
        logger.error(f"Failed to award badges for profile {profile.external_id}: {e}")
    return awarded


async def settle_progress(profile: Profile, now: datetime, tz: tzinfo) -> tuple[ProgressState, list[str]]:
    """Пересчитать прогресс после завершения: кэш + новые значки."""
    state = await load_progress_state(profile, now, tz)
    await refresh_profile_cache(profile, state)
    unlocked = await award_new_badges(profile, state, now)
    return state, unlocked
