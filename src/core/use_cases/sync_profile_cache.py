"""
Sync Profile Cache Use Case - пересчёт денормализованных level/streak.

AICODE-NOTE: Кэш в Profile может разойтись с реальными данными (ручные
правки, старые версии клиента). Этот use-case пересчитывает его из
XP и событий завершения и сообщает о расхождении.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.core.use_cases.progress_state import (
    load_progress_state,
    progress_timezone,
    refresh_profile_cache,
    utc_now,
)
from src.database.models import Profile

logger = logging.getLogger(__name__)


@dataclass
class CacheSyncResult:
    """Значения кэша до и после пересчёта."""

    external_id: str
    old_level: int
    new_level: int
    old_streak: int
    new_streak: int
    old_highest_streak: int
    new_highest_streak: int

    @property
    def drifted(self) -> bool:
        return (
            self.old_level != self.new_level
            or self.old_streak != self.new_streak
            or self.old_highest_streak != self.new_highest_streak
        )


class SyncProfileCacheUseCase:
    """Use-case для пересчёта кэша прогресса."""

    async def execute(
        self, profile: Profile, now: Optional[datetime] = None, dry_run: bool = False
    ) -> CacheSyncResult:
        """
        Пересчитать кэш профиля.

        Args:
            profile: Профиль
            now: Момент расчёта (для тестов, по умолчанию сейчас в UTC)
            dry_run: Только посчитать, ничего не записывать
        """
        if now is None:
            now = utc_now()

        old_level, old_streak, old_highest = (
            profile.level,
            profile.streak,
            profile.highest_streak,
        )
        state = await load_progress_state(profile, now, progress_timezone())

        result = CacheSyncResult(
            external_id=profile.external_id,
            old_level=old_level,
            new_level=state.level_info.level,
            old_streak=old_streak,
            new_streak=state.streaks.current,
            old_highest_streak=old_highest,
            new_highest_streak=state.streaks.highest,
        )

        if result.drifted:
            logger.warning(
                f"Profile {profile.external_id} cache drift: "
                f"level {old_level}->{result.new_level}, "
                f"streak {old_streak}->{result.new_streak}, "
                f"highest {old_highest}->{result.new_highest_streak}"
            )

        if not dry_run:
            await refresh_profile_cache(profile, state)

        return result
