"""
Badge Rules Domain - каталог значков и проверка условий их получения.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД. Значения метрик собирает
use-case, здесь только сравнение с порогами.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

# Метрики снимка прогресса
METRIC_COMPLETED_LESSONS = "completed_lessons"
METRIC_BEST_STREAK = "best_streak"
METRIC_LEVEL = "level"
METRIC_TOTAL_XP = "total_xp"
METRIC_METHOD = "method"

# Учебные инструменты: клиент сообщает об их использовании сам
TOOL_METHODS = frozenset(
    {
        "pomodoro",
        "ambient_sounds",
        "feynman",
        "spaced_repetition",
        "sq3r",
    }
)

# Счётчики, которые ведут только use-case'ы завершения
DERIVED_METHODS = frozenset(
    {
        "task_completion",
        "style_specific_lessons",
        "completed_goals",
        "diverse_lessons",
    }
)

KNOWN_METHODS = TOOL_METHODS | DERIVED_METHODS


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    description: str
    metric: str
    threshold: int
    difficulty: str = "easy"  # easy | medium | hard
    method: str | None = None


@dataclass(frozen=True)
class BadgeStatus:
    badge: BadgeDefinition
    unlocked: bool
    progress: int
    max_progress: int


@dataclass(frozen=True)
class ProgressSnapshot:
    """Значения метрик, по которым проверяются значки."""

    completed_lessons: int = 0
    current_streak: int = 0
    highest_streak: int = 0
    level: int = 1
    total_xp: int = 0
    method_usage: Mapping[str, int] = field(default_factory=dict)


BADGES: tuple[BadgeDefinition, ...] = (
    # Прогресс в обучении
    BadgeDefinition("first_lesson", "Prima lecție", "Ai finalizat prima ta lecție", METRIC_COMPLETED_LESSONS, 1),
    BadgeDefinition("five_lessons", "Învățăcel", "Ai finalizat 5 lecții", METRIC_COMPLETED_LESSONS, 5),
    BadgeDefinition("ten_lessons", "Student dedicat", "Ai finalizat 10 lecții", METRIC_COMPLETED_LESSONS, 10, "medium"),
    # Серии
    BadgeDefinition("streak_3", "Consecvență", "Ai menținut o serie de studiu de 3 zile", METRIC_BEST_STREAK, 3),
    BadgeDefinition("streak_7", "Săptămâna perfectă", "Ai menținut o serie de studiu de 7 zile", METRIC_BEST_STREAK, 7, "medium"),
    BadgeDefinition("streak_30", "Maestru al consecvenței", "Ai menținut o serie de studiu de 30 de zile", METRIC_BEST_STREAK, 30, "hard"),
    # Уровень и XP
    BadgeDefinition("level_5", "Nivel 5", "Ai atins nivelul 5", METRIC_LEVEL, 5, "medium"),
    BadgeDefinition("xp_1000", "1000 XP", "Ai acumulat 1000 XP", METRIC_TOTAL_XP, 1000, "hard"),
    # Учебные методы
    BadgeDefinition("pomodoro_master", "Maestru Pomodoro", "Ai finalizat 10 sesiuni Pomodoro", METRIC_METHOD, 10, "medium", "pomodoro"),
    BadgeDefinition("sound_explorer", "Explorator de sunete", "Ai folosit 3 sunete ambientale diferite", METRIC_METHOD, 3, "easy", "ambient_sounds"),
    BadgeDefinition("feynman_technique", "Tehnica Feynman", "Ai folosit tehnica Feynman", METRIC_METHOD, 1, "easy", "feynman"),
    BadgeDefinition("spaced_repetition", "Repetiție spațiată", "Ai folosit repetiția spațiată de 5 ori", METRIC_METHOD, 5, "medium", "spaced_repetition"),
    BadgeDefinition("sq3r_method", "Metoda SQ3R", "Ai folosit metoda SQ3R", METRIC_METHOD, 1, "easy", "sq3r"),
    BadgeDefinition("task_master", "Organizator Eficient", "Ai finalizat 10 sarcini", METRIC_METHOD, 10, "medium", "task_completion"),
    BadgeDefinition("learning_style_master", "Maestru al stilului de învățare", "Ai finalizat 5 lecții potrivite stilului tău", METRIC_METHOD, 5, "medium", "style_specific_lessons"),
    BadgeDefinition("goal_achiever", "Realizator de obiective", "Ai atins 3 obiective", METRIC_METHOD, 3, "medium", "completed_goals"),
    BadgeDefinition("knowledge_explorer", "Explorator al cunoașterii", "Ai studiat lecții din 3 domenii diferite", METRIC_METHOD, 3, "easy", "diverse_lessons"),
)

BADGES_BY_ID = {badge.id: badge for badge in BADGES}


def metric_value(badge: BadgeDefinition, snapshot: ProgressSnapshot) -> int:
    """Текущее значение метрики значка."""
    if badge.metric == METRIC_COMPLETED_LESSONS:
        return snapshot.completed_lessons
    if badge.metric == METRIC_BEST_STREAK:
        # Серия засчитывается, если достигнута сейчас или когда-либо
        return max(snapshot.current_streak, snapshot.highest_streak)
    if badge.metric == METRIC_LEVEL:
        return snapshot.level
    if badge.metric == METRIC_TOTAL_XP:
        return snapshot.total_xp
    if badge.metric == METRIC_METHOD:
        return snapshot.method_usage.get(badge.method or "", 0)
    raise ValueError(f"Unknown badge metric: {badge.metric}")


def evaluate_badges(
    snapshot: ProgressSnapshot, badges: Iterable[BadgeDefinition] = BADGES
) -> list[BadgeStatus]:
    """Статус каждого значка: получен ли и прогресс до порога."""
    statuses = []
    for badge in badges:
        value = metric_value(badge, snapshot)
        statuses.append(
            BadgeStatus(
                badge=badge,
                unlocked=value >= badge.threshold,
                progress=min(value, badge.threshold),
                max_progress=badge.threshold,
            )
        )
    return statuses


def newly_unlocked(
    snapshot: ProgressSnapshot, already_earned: Iterable[str]
) -> list[BadgeDefinition]:
    """Значки, условия которых выполнены, но которые ещё не выданы."""
    earned = set(already_earned)
    return [
        status.badge
        for status in evaluate_badges(snapshot)
        if status.unlocked and status.badge.id not in earned
    ]
