"""Storage layer - тупые CRUD репозитории без бизнес-логики."""

from . import (
    activity_repo,
    badge_repo,
    completion_repo,
    goal_repo,
    group_repo,
    lesson_repo,
    method_usage_repo,
    profile_repo,
    task_repo,
)

__all__ = [
    "activity_repo",
    "badge_repo",
    "completion_repo",
    "goal_repo",
    "group_repo",
    "lesson_repo",
    "method_usage_repo",
    "profile_repo",
    "task_repo",
]
