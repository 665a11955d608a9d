"""
Day Boundary - перевод временных меток в календарные дни.

AICODE-NOTE: Часовой пояс всегда передаётся явно. Наивные datetime
считаются UTC, никакого локального времени сервера.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.core.domain.errors import InvalidArgument

UTC = timezone.utc

Timestamp = datetime | date


def resolve_timezone(name: str) -> tzinfo:
    """IANA имя -> tzinfo. "UTC" всегда доступен без tzdata."""
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidArgument(f"Unknown timezone: {name}") from e


def to_calendar_day(value: Timestamp, tz: tzinfo = UTC) -> date:
    """
    Календарный день временной метки в часовом поясе tz.

    - date (не datetime) уже является днём и возвращается как есть
    - aware datetime переводится в tz
    - naive datetime считается UTC, затем переводится в tz

    Полночь относится к дню, который она начинает.
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    raise InvalidArgument(f"Unsupported timestamp value: {value!r}")


def active_days(timestamps: Iterable[Timestamp], tz: tzinfo = UTC) -> set[date]:
    """Множество дней, в которые было хотя бы одно завершение."""
    return {to_calendar_day(ts, tz) for ts in timestamps}


def daily_counts(timestamps: Iterable[Timestamp], tz: tzinfo = UTC) -> Counter[date]:
    """Число завершений по дням (без схлопывания)."""
    return Counter(to_calendar_day(ts, tz) for ts in timestamps)
