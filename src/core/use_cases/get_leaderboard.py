"""
Get Leaderboard Use Case - рейтинг участников учебной группы.

AICODE-NOTE: Уровень и серия каждого участника пересчитываются из XP и
событий завершения. Кэшированные level/streak профиля могут отставать,
для рейтинга их не читаем.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.config import config
from src.core.domain.gamification import calculate_user_level
from src.core.domain.leaderboard_rules import (
    SORT_XP,
    LeaderboardEntry,
    RankedEntry,
    display_name,
    rank_entries,
)
from src.core.use_cases.progress_state import compute_streaks, progress_timezone, utc_now
from src.database.models import Profile
from src.storage import group_repo, lesson_repo

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardResult:
    success: bool
    group_id: int = 0
    group_name: str = ""
    sort_by: str = SORT_XP
    entries: list[RankedEntry] = field(default_factory=list)
    error_message: str = ""


async def build_entry(profile: Profile, now: datetime) -> LeaderboardEntry:
    """Живые значения прогресса одного участника."""
    streaks = await compute_streaks(profile, now, progress_timezone())
    return LeaderboardEntry(
        external_id=profile.external_id,
        name=display_name(profile.username),
        xp=profile.xp,
        level=calculate_user_level(profile.xp, config.XP_PER_LEVEL).level,
        current_streak=streaks.current,
        highest_streak=streaks.highest,
        lessons_completed=await lesson_repo.count_completed(profile),
    )


class GetLeaderboardUseCase:
    """Use-case для рейтинга группы."""

    async def execute(
        self, group_id: int, sort_by: str = SORT_XP, now: Optional[datetime] = None
    ) -> LeaderboardResult:
        """
        Рейтинг группы.

        Args:
            group_id: ID группы
            sort_by: xp | level | streak | lessons | name
            now: "Сейчас" для расчёта серий (по умолчанию текущий момент UTC)

        Raises:
            InvalidArgument: неизвестный критерий сортировки
        """
        if now is None:
            now = utc_now()

        group = await group_repo.get_group(group_id)
        if not group:
            return LeaderboardResult(success=False, error_message="Grupul nu a fost găsit")

        profiles = await group_repo.get_member_profiles(group)
        entries = [await build_entry(profile, now) for profile in profiles]
        ranked = rank_entries(entries, sort_by)

        logger.info(f"Leaderboard for group {group_id}: {len(ranked)} members by {sort_by}")

        return LeaderboardResult(
            success=True,
            group_id=group.id,
            group_name=group.name,
            sort_by=sort_by,
            entries=ranked,
        )
