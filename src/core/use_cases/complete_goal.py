"""
Complete Goal Use Case - сценарий достижения цели из повестки.

Награда берётся из goal.xp_reward (см. gamification.goal_xp_reward).
"""

import logging
from datetime import datetime
from typing import Optional

from src.core.domain.gamification import goal_xp_reward
from src.core.use_cases.award_xp import AwardXPUseCase
from src.core.use_cases.progress_state import (
    CompletionResult,
    progress_timezone,
    settle_progress,
    utc_now,
)
from src.database.models import Profile
from src.storage import goal_repo, method_usage_repo

logger = logging.getLogger(__name__)


class CompleteGoalUseCase:
    """Use-case для достижения цели."""

    def __init__(self, award_xp: Optional[AwardXPUseCase] = None):
        self.award_xp = award_xp or AwardXPUseCase()

    async def execute(
        self, profile: Profile, goal_id: int, now: Optional[datetime] = None
    ) -> CompletionResult:
        """
        Отметить цель достигнутой.

        Args:
            profile: Профиль
            goal_id: ID цели
            now: Момент завершения (для тестов, по умолчанию сейчас в UTC)
        """
        if now is None:
            now = utc_now()

        goal = await goal_repo.get_goal(goal_id)
        if not goal or goal.profile_id != profile.id:
            return CompletionResult(success=False, error_message="Obiectivul nu a fost găsit")

        if goal.completed:
            return CompletionResult(
                success=False, error_message="Obiectivul este deja finalizat"
            )

        await goal_repo.mark_completed(goal, now)

        xp_earned = goal_xp_reward(goal)
        award = await self.award_xp.execute(
            profile,
            xp_earned,
            activity_type="goal_completion",
            details={"goal_id": goal.id, "goal_title": goal.title},
            now=now,
        )
        await method_usage_repo.increment(profile, "completed_goals", now)

        state, unlocked = await settle_progress(profile, now, progress_timezone())

        logger.info(
            f"Goal {goal_id} completed by profile {profile.external_id}: +{xp_earned} XP"
        )

        return CompletionResult(
            success=True,
            xp_earned=xp_earned,
            total_xp=award.total_xp,
            level=award.level,
            leveled_up=award.leveled_up,
            current_streak=state.streaks.current,
            highest_streak=state.streaks.highest,
            unlocked_badges=unlocked,
        )
