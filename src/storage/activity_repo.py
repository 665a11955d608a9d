"""
ActivityLog Repository - только добавление и чтение журнала.

AICODE-NOTE: Записи журнала не изменяются и не удаляются.
"""

from datetime import datetime
from typing import Any

from src.database.models import ActivityLog, Profile


async def log_activity(
    profile: Profile,
    activity_type: str,
    details: dict[str, Any],
    created_at: datetime,
) -> ActivityLog:
    """Добавить запись в журнал активности."""
    return await ActivityLog.create(
        profile=profile,
        activity_type=activity_type,
        details=details,
        created_at=created_at,
    )


async def get_recent_activity(profile: Profile, limit: int = 10) -> list[ActivityLog]:
    return await ActivityLog.filter(profile=profile).order_by("-created_at", "-id").limit(limit)
