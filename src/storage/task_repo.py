"""
Task Repository - CRUD операции для Task модели.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
"""

from datetime import datetime
from typing import Optional

from src.database.models import Profile, Task


async def get_task(task_id: int) -> Optional[Task]:
    return await Task.get_or_none(id=task_id)


async def mark_completed(task: Task, completed_at: datetime) -> Task:
    task.completed = True
    task.completed_at = completed_at
    await task.save()
    return task


async def get_completion_timestamps(
    profile: Profile, since: datetime | None = None
) -> list[datetime]:
    query = Task.filter(profile=profile, completed=True, completed_at__isnull=False)
    if since is not None:
        query = query.filter(completed_at__gte=since)
    return await query.order_by("completed_at").values_list("completed_at", flat=True)
