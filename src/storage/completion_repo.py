"""
Completion Repository - временные метки завершений по виду активности.

AICODE-NOTE: Единая точка, откуда движок серий получает события завершения.
Отдаёт уже разобранные datetime, парсинг строк сюда не попадает.
"""

from datetime import datetime

from src.core.domain.errors import InvalidArgument
from src.database.models import Profile
from src.storage import goal_repo, lesson_repo, task_repo

COMPLETION_KINDS = ("lesson", "task", "goal", "all")

_FETCHERS = {
    "lesson": lesson_repo.get_completion_timestamps,
    "task": task_repo.get_completion_timestamps,
    "goal": goal_repo.get_completion_timestamps,
}


async def get_completion_timestamps(
    profile: Profile, kind: str = "lesson", since: datetime | None = None
) -> list[datetime]:
    """
    Получить время завершений пользователя.

    Args:
        profile: Profile instance
        kind: lesson | task | goal | all
        since: нижняя граница (включительно)

    Raises:
        InvalidArgument: неизвестный вид активности
    """
    if kind == "all":
        timestamps: list[datetime] = []
        for fetch in _FETCHERS.values():
            timestamps.extend(await fetch(profile, since))
        return sorted(timestamps)

    fetch = _FETCHERS.get(kind)
    if fetch is None:
        raise InvalidArgument(
            f"Unknown completion kind: {kind}. Expected one of {COMPLETION_KINDS}"
        )
    return await fetch(profile, since)
