"""
Complete Task Use Case - сценарий выполнения задачи из списка дел.
"""

import logging
from datetime import datetime
from typing import Optional

from src.core.domain.gamification import TASK_COMPLETION_XP
from src.core.use_cases.award_xp import AwardXPUseCase
from src.core.use_cases.progress_state import (
    CompletionResult,
    progress_timezone,
    settle_progress,
    utc_now,
)
from src.database.models import Profile
from src.storage import method_usage_repo, task_repo

logger = logging.getLogger(__name__)


class CompleteTaskUseCase:
    """Use-case для выполнения задачи."""

    def __init__(self, award_xp: Optional[AwardXPUseCase] = None):
        self.award_xp = award_xp or AwardXPUseCase()

    async def execute(
        self, profile: Profile, task_id: int, now: Optional[datetime] = None
    ) -> CompletionResult:
        if now is None:
            now = utc_now()

        task = await task_repo.get_task(task_id)
        # Чужая задача для пользователя не существует
        if not task or task.profile_id != profile.id:
            return CompletionResult(success=False, error_message="Sarcina nu a fost găsită")

        if task.completed:
            return CompletionResult(
                success=False, error_message="Sarcina este deja finalizată"
            )

        await task_repo.mark_completed(task, now)

        award = await self.award_xp.execute(
            profile,
            TASK_COMPLETION_XP,
            activity_type="task_completion",
            details={"task_id": task.id, "task_title": task.title},
            now=now,
        )
        await method_usage_repo.increment(profile, "task_completion", now)

        state, unlocked = await settle_progress(profile, now, progress_timezone())

        logger.info(f"Task {task_id} completed by profile {profile.external_id}")

        return CompletionResult(
            success=True,
            xp_earned=TASK_COMPLETION_XP,
            total_xp=award.total_xp,
            level=award.level,
            leveled_up=award.leveled_up,
            current_streak=state.streaks.current,
            highest_streak=state.streaks.highest,
            unlocked_badges=unlocked,
        )
