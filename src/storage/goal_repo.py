"""
Goal Repository - CRUD operations for Goal model.

AICODE-NOTE: This is a dumb repository layer - only database access,
no business logic. Use-cases orchestrate these operations.
"""

from datetime import datetime
from typing import Optional

from src.database.models import Goal, Profile


async def get_goal(goal_id: int) -> Optional[Goal]:
    """Get goal by ID."""
    return await Goal.get_or_none(id=goal_id)


async def mark_completed(goal: Goal, completed_at: datetime) -> Goal:
    goal.completed = True
    goal.completed_at = completed_at
    await goal.save()
    return goal


async def get_completion_timestamps(
    profile: Profile, since: datetime | None = None
) -> list[datetime]:
    """
    Get completion times of finished goals.

    Args:
        profile: Profile instance
        since: Inclusive lower bound, None for the whole history
    """
    query = Goal.filter(profile=profile, completed=True, completed_at__isnull=False)
    if since is not None:
        query = query.filter(completed_at__gte=since)
    return await query.order_by("completed_at").values_list("completed_at", flat=True)
