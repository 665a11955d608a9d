"""
Award XP Use Case - начисление XP с записью в журнал активности.

AICODE-NOTE: Use-case объединяет репозитории + домейн-правила.
Роутеры и другие use-case'ы вызывают его и получают результат.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from src.config import config
from src.core.domain.day_boundary import to_calendar_day
from src.core.domain.gamification import (
    calculate_user_level,
    has_leveled_up,
    validate_xp_amount,
)
from src.core.use_cases.progress_state import progress_timezone, utc_now
from src.database.models import Profile
from src.storage import activity_repo, profile_repo

logger = logging.getLogger(__name__)


@dataclass
class XPAwardResult:
    """Результат начисления XP."""

    success: bool
    xp_earned: int = 0
    total_xp: int = 0
    level: int = 1
    leveled_up: bool = False
    error_message: str = ""


class AwardXPUseCase:
    """Use-case для начисления XP."""

    async def execute(
        self,
        profile: Profile,
        amount: int,
        activity_type: str = "xp_award",
        details: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> XPAwardResult:
        """
        Начислить XP.

        Args:
            profile: Профиль
            amount: Сколько XP начислить (> 0)
            activity_type: Тип записи в журнале активности
            details: Доп. данные для журнала (xp_earned добавляется всегда)
            now: Момент начисления (для тестов, по умолчанию сейчас в UTC)

        Raises:
            InvalidArgument: amount не положительное целое
        """
        validate_xp_amount(amount)
        if now is None:
            now = utc_now()

        xp_before = profile.xp

        # 1. Обновить XP (репозиторий)
        profile = await profile_repo.add_xp(
            profile, amount, to_calendar_day(now, progress_timezone())
        )
        level_info = calculate_user_level(profile.xp, config.XP_PER_LEVEL)

        # 2. Записать в журнал активности
        # AICODE-NOTE: XP уже начислен, ошибка журнала не отменяет начисление
        try:
            await activity_repo.log_activity(
                profile, activity_type, {**(details or {}), "xp_earned": amount}, now
            )
        except Exception as e:
            logger.error(f"Failed to record activity for profile {profile.external_id}: {e}")

        logger.info(
            f"Profile {profile.external_id}: +{amount} XP ({activity_type}), "
            f"total {profile.xp}, level {level_info.level}"
        )

        return XPAwardResult(
            success=True,
            xp_earned=amount,
            total_xp=profile.xp,
            level=level_info.level,
            leveled_up=has_leveled_up(xp_before, profile.xp, config.XP_PER_LEVEL),
        )
