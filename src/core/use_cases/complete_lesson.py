"""
Complete Lesson Use Case - сценарий завершения урока.

AICODE-NOTE: Use-case объединяет репозитории + домейн-правила.
Роутеры вызывают use-case и получают результат.
"""

import logging
from datetime import datetime
from typing import Optional

from src.core.domain.gamification import lesson_xp_reward
from src.core.use_cases.award_xp import AwardXPUseCase
from src.core.use_cases.progress_state import (
    CompletionResult,
    progress_timezone,
    settle_progress,
    utc_now,
)
from src.database.models import Lesson, Profile
from src.storage import lesson_repo, method_usage_repo

logger = logging.getLogger(__name__)

UNIVERSAL_STYLES = ("all", "universal")


def matches_learning_style(lesson: Lesson, profile: Profile) -> bool:
    """Урок подходит стилю обучения пользователя (или универсальный)."""
    if lesson.learning_style in UNIVERSAL_STYLES:
        return True
    return bool(profile.learning_style) and lesson.learning_style == profile.learning_style


class CompleteLessonUseCase:
    """Use-case для завершения урока."""

    def __init__(self, award_xp: Optional[AwardXPUseCase] = None):
        self.award_xp = award_xp or AwardXPUseCase()

    async def execute(
        self, profile: Profile, lesson_id: int, now: Optional[datetime] = None
    ) -> CompletionResult:
        """
        Завершить урок.

        Args:
            profile: Профиль
            lesson_id: ID урока
            now: Момент завершения (для тестов, по умолчанию сейчас в UTC)

        Returns:
            CompletionResult с результатом операции
        """
        if now is None:
            now = utc_now()

        # 1. Получить урок
        lesson = await lesson_repo.get_lesson(lesson_id)
        if not lesson:
            return CompletionResult(success=False, error_message="Lecția nu a fost găsită")

        # 2. Проверить, что урок ещё не пройден
        progress = await lesson_repo.get_or_create_progress(profile, lesson)
        if progress.completed:
            return CompletionResult(
                success=False, error_message="Lecția este deja finalizată"
            )

        # 3. Отметить завершение (событие завершения)
        await lesson_repo.mark_completed(progress, now)

        # 4. Начислить XP
        xp_earned = lesson_xp_reward(lesson)
        award = await self.award_xp.execute(
            profile,
            xp_earned,
            activity_type="lesson_completion",
            details={"lesson_id": lesson.id, "lesson_title": lesson.title},
            now=now,
        )

        # 5. Счётчик уроков в стиле пользователя
        if matches_learning_style(lesson, profile):
            await method_usage_repo.increment(profile, "style_specific_lessons", now)

        # Первый пройденный урок новой области
        if lesson.category:
            in_category = await lesson_repo.count_completed_in_category(profile, lesson.category)
            if in_category == 1:
                await method_usage_repo.increment(profile, "diverse_lessons", now)

        # 6. Кэш прогресса + значки
        state, unlocked = await settle_progress(profile, now, progress_timezone())

        logger.info(
            f"Lesson {lesson_id} completed by profile {profile.external_id}: +{xp_earned} XP"
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
