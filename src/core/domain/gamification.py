"""
Gamification Domain Rules - чистые функции для расчета XP и level.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects.
Вызываются из use-cases и роутеров. Streak считается в streak_rules.py.
"""

from dataclasses import dataclass

from src.core.domain.errors import InvalidArgument
from src.database.models import Goal, Lesson

XP_PER_LEVEL = 150

LESSON_XP_DEFAULT = 50
TASK_COMPLETION_XP = 5
GOAL_XP_DEFAULT = 10


@dataclass(frozen=True)
class LevelInfo:
    """Уровень и прогресс внутри уровня."""

    level: int
    current_level_xp: int
    next_level_xp: int

    @property
    def progress_ratio(self) -> float:
        """Доля заполнения progress bar (0.0 - 1.0)."""
        return self.current_level_xp / self.next_level_xp


def _require_non_negative_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")
    return value


def calculate_user_level(xp: int, xp_per_level: int = XP_PER_LEVEL) -> LevelInfo:
    """
    Рассчитать уровень пользователя на основе общего XP.

    Плоская стоимость уровня: level = xp // xp_per_level + 1
    Например (150 XP на уровень):
    - 0-149 XP = Level 1
    - 150-299 XP = Level 2
    - 375 XP = Level 3, 75/150 внутри уровня

    Граница уровня принадлежит новому уровню (150 XP = Level 2, 0/150).

    Raises:
        InvalidArgument: отрицательный XP или неположительная стоимость уровня
    """
    _require_non_negative_int(xp, "xp")
    if isinstance(xp_per_level, bool) or not isinstance(xp_per_level, int):
        raise InvalidArgument(f"xp_per_level must be an integer, got {xp_per_level!r}")
    if xp_per_level <= 0:
        raise InvalidArgument(f"xp_per_level must be positive, got {xp_per_level}")

    return LevelInfo(
        level=xp // xp_per_level + 1,
        current_level_xp=xp % xp_per_level,
        next_level_xp=xp_per_level,
    )


def validate_xp_amount(amount: int) -> int:
    """Награда XP должна быть положительным целым числом."""
    _require_non_negative_int(amount, "amount")
    if amount == 0:
        raise InvalidArgument("amount must be positive")
    return amount


def lesson_xp_reward(lesson: Lesson) -> int:
    """
    Рассчитать награду XP за урок.

    Берётся lesson.xp_reward, при отсутствии значения - LESSON_XP_DEFAULT.
    """
    return lesson.xp_reward if lesson.xp_reward and lesson.xp_reward > 0 else LESSON_XP_DEFAULT


def goal_xp_reward(goal: Goal) -> int:
    return goal.xp_reward if goal.xp_reward and goal.xp_reward > 0 else GOAL_XP_DEFAULT


def has_leveled_up(xp_before: int, xp_after: int, xp_per_level: int = XP_PER_LEVEL) -> bool:
    return (
        calculate_user_level(xp_after, xp_per_level).level
        > calculate_user_level(xp_before, xp_per_level).level
    )
