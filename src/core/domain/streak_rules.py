"""
Streak Rules Domain - серии активных дней и гистограмма активности.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects и БЕЗ чтения
системных часов: "сейчас" и часовой пояс передаются явно.
Активный день = календарный день с хотя бы одним завершением.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo

from src.core.domain.day_boundary import (
    UTC,
    Timestamp,
    active_days,
    daily_counts,
    to_calendar_day,
)
from src.core.domain.errors import InvalidArgument

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakSummary:
    current: int
    highest: int


@dataclass(frozen=True)
class ActivityDay:
    day: date
    count: int


def current_streak(
    timestamps: Iterable[Timestamp], now: Timestamp, tz: tzinfo = UTC
) -> int:
    """
    Текущая серия дней, заканчивающаяся сегодня или вчера.

    Логика:
    - Нет активности ни сегодня, ни вчера → 0
    - Иначе начинаем с последнего активного дня (сегодня/вчера)
      и идём назад, пока дни идут подряд
    - Несколько завершений в один день считаются одним днём
    """
    days = active_days(timestamps, tz)
    if not days:
        return 0

    today = to_calendar_day(now, tz)
    if today in days:
        cursor = today
    elif today - ONE_DAY in days:
        cursor = today - ONE_DAY
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def highest_streak(timestamps: Iterable[Timestamp], tz: tzinfo = UTC) -> int:
    """
    Самая длинная серия подряд идущих активных дней за всю историю.

    Один проход по отсортированным дням: серия сбрасывается в 1,
    если разница между соседними днями не равна ровно одному дню.
    """
    days = sorted(active_days(timestamps, tz))
    if not days:
        return 0

    best = run = 1
    for prev, cur in zip(days, days[1:]):
        if (cur - prev).days == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def window_bounds(now: Timestamp, window_days: int, tz: tzinfo = UTC) -> tuple[date, date]:
    """
    Первый и последний (сегодня) день окна.

    Raises:
        InvalidArgument: окно не целое, не положительное или начинается
            раньше date.min
    """
    if isinstance(window_days, bool) or not isinstance(window_days, int):
        raise InvalidArgument(f"window_days must be an integer, got {window_days!r}")
    if window_days <= 0:
        raise InvalidArgument(f"window_days must be positive, got {window_days}")
    today = to_calendar_day(now, tz)
    if window_days - 1 > (today - date.min).days:
        raise InvalidArgument(
            f"window_days={window_days} reaches before {date.min.isoformat()}"
        )
    return today - timedelta(days=window_days - 1), today


def activity_histogram(
    timestamps: Iterable[Timestamp],
    now: Timestamp,
    window_days: int,
    tz: tzinfo = UTC,
) -> dict[date, int]:
    """
    Число завершений по дням за последние window_days дней (включая сегодня).

    Дни без активности в словарь не попадают, вызывающий заполняет нулями
    (см. fill_activity_window). Завершения в один день НЕ схлопываются.
    """
    start, end = window_bounds(now, window_days, tz)
    return {
        day: count
        for day, count in sorted(daily_counts(timestamps, tz).items())
        if start <= day <= end
    }


def fill_activity_window(
    histogram: dict[date, int],
    now: Timestamp,
    window_days: int,
    tz: tzinfo = UTC,
) -> list[ActivityDay]:
    """Окно из window_days дней от старого к новому, пропуски = 0."""
    start, _ = window_bounds(now, window_days, tz)
    return [
        ActivityDay(day=start + timedelta(days=i), count=histogram.get(start + timedelta(days=i), 0))
        for i in range(window_days)
    ]


def summarize_streaks(
    timestamps: Iterable[Timestamp], now: Timestamp, tz: tzinfo = UTC
) -> StreakSummary:
    """Текущая и максимальная серии по одному набору событий."""
    days = active_days(timestamps, tz)
    current = current_streak(days, now, tz)
    return StreakSummary(current=current, highest=max(highest_streak(days, tz), current))
