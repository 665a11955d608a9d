"""
Record Method Usage Use Case - учёт использования учебного метода
(Pomodoro, Feynman, SQ3R, ...) и выдача значков.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.domain.badge_rules import DERIVED_METHODS, TOOL_METHODS
from src.core.use_cases.progress_state import (
    award_new_badges,
    load_progress_state,
    progress_timezone,
    utc_now,
)
from src.database.models import Profile
from src.storage import method_usage_repo

logger = logging.getLogger(__name__)


@dataclass
class MethodUsageResult:
    success: bool
    method: str = ""
    count: int = 0
    unlocked_badges: list[str] = field(default_factory=list)
    error_message: str = ""


class RecordMethodUsageUseCase:
    """Use-case для учёта использования метода."""

    async def execute(
        self, profile: Profile, method: str, now: Optional[datetime] = None
    ) -> MethodUsageResult:
        if now is None:
            now = utc_now()

        if method in DERIVED_METHODS:
            logger.warning(
                f"Profile {profile.external_id} tried to record derived counter {method}"
            )
            return MethodUsageResult(
                success=False,
                method=method,
                error_message=f"Metoda {method} se înregistrează automat",
            )
        if method not in TOOL_METHODS:
            return MethodUsageResult(
                success=False, method=method, error_message=f"Metodă necunoscută: {method}"
            )

        count = await method_usage_repo.increment(profile, method, now)

        state = await load_progress_state(profile, now, progress_timezone())
        unlocked = await award_new_badges(profile, state, now)

        logger.info(f"Profile {profile.external_id} used {method} ({count} times)")

        return MethodUsageResult(
            success=True, method=method, count=count, unlocked_badges=unlocked
        )
