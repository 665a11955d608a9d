"""
Leaderboard Rules Domain - сортировка рейтинга учебной группы.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД. Значения (уровень, серия)
use-case считает заново из XP и завершений, кэш профиля не используется.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from src.core.domain.errors import InvalidArgument

SORT_XP = "xp"
SORT_LEVEL = "level"
SORT_STREAK = "streak"
SORT_LESSONS = "lessons"
SORT_NAME = "name"

SORT_KEYS = (SORT_XP, SORT_LEVEL, SORT_STREAK, SORT_LESSONS, SORT_NAME)

DEFAULT_DISPLAY_NAME = "Utilizator"


@dataclass(frozen=True)
class LeaderboardEntry:
    external_id: str
    name: str
    xp: int
    level: int
    current_streak: int
    highest_streak: int
    lessons_completed: int


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    entry: LeaderboardEntry


def display_name(username: str | None) -> str:
    return username or DEFAULT_DISPLAY_NAME


def _metric(entry: LeaderboardEntry, sort_by: str) -> int:
    if sort_by == SORT_XP:
        return entry.xp
    if sort_by == SORT_LEVEL:
        return entry.level
    if sort_by == SORT_STREAK:
        return entry.current_streak
    return entry.lessons_completed


def rank_entries(entries: Iterable[LeaderboardEntry], sort_by: str = SORT_XP) -> list[RankedEntry]:
    """
    Упорядочить участников и пронумеровать места с 1.

    Числовые критерии: по убыванию, при равенстве по имени и id.
    "name": по алфавиту без учёта регистра.

    Raises:
        InvalidArgument: неизвестный критерий сортировки
    """
    if sort_by not in SORT_KEYS:
        raise InvalidArgument(f"sort_by must be one of {', '.join(SORT_KEYS)}, got {sort_by!r}")

    if sort_by == SORT_NAME:
        ordered = sorted(entries, key=lambda e: (e.name.casefold(), e.external_id))
    else:
        ordered = sorted(
            entries,
            key=lambda e: (-_metric(e, sort_by), e.name.casefold(), e.external_id),
        )
    return [RankedEntry(rank=i, entry=e) for i, e in enumerate(ordered, start=1)]
