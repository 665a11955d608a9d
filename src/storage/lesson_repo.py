"""
Lesson Repository - CRUD операции для Lesson и LessonProgress.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
"""

from datetime import datetime
from typing import Optional

from src.database.models import Lesson, LessonProgress, Profile


async def get_lesson(lesson_id: int) -> Optional[Lesson]:
    return await Lesson.get_or_none(id=lesson_id)


async def get_or_create_progress(profile: Profile, lesson: Lesson) -> LessonProgress:
    progress, _ = await LessonProgress.get_or_create(profile=profile, lesson=lesson)
    return progress


async def mark_completed(progress: LessonProgress, completed_at: datetime) -> LessonProgress:
    """Отметить урок пройденным."""
    progress.completed = True
    progress.completed_at = completed_at
    await progress.save()
    return progress


async def count_completed(profile: Profile) -> int:
    return await LessonProgress.filter(profile=profile, completed=True).count()


async def get_completion_timestamps(
    profile: Profile, since: datetime | None = None
) -> list[datetime]:
    """
    Время завершения пройденных уроков.

    Args:
        profile: Profile instance
        since: нижняя граница (включительно), None = вся история
    """
    query = LessonProgress.filter(
        profile=profile, completed=True, completed_at__isnull=False
    )
    if since is not None:
        query = query.filter(completed_at__gte=since)
    return await query.order_by("completed_at").values_list("completed_at", flat=True)


async def count_completed_in_category(profile: Profile, category: str) -> int:
    return await LessonProgress.filter(
        profile=profile, completed=True, lesson__category=category
    ).count()
