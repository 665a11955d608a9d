"""Tests for streak and activity histogram rules."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.core.domain.errors import InvalidArgument
from src.core.domain.streak_rules import (
    ActivityDay,
    StreakSummary,
    activity_histogram,
    current_streak,
    fill_activity_window,
    highest_streak,
    summarize_streaks,
    window_bounds,
)

# Фиксированный "сейчас": понедельник, полдень UTC
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def at(days_ago: int, hour: int = 10) -> datetime:
    """Временная метка days_ago дней назад в заданный час UTC."""
    day = TODAY - timedelta(days=days_ago)
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


# ============ current_streak ============


def test_current_streak_empty() -> None:
    assert current_streak([], NOW) == 0


@pytest.mark.parametrize(
    "days_ago, expected",
    [
        ([0], 1),
        ([0, 1], 2),  # сегодня и вчера
        ([1], 1),  # серия ещё жива, если вчера была активность
        ([1, 2, 3], 3),
        ([2], 0),  # пропущен один день
        ([0, 1, 3, 4, 5], 2),  # пропуск обрывает серию
        ([5, 6, 7], 0),
    ],
)
def test_current_streak_table(days_ago: list[int], expected: int) -> None:
    assert current_streak([at(d) for d in days_ago], NOW) == expected


def test_current_streak_same_day_counts_once() -> None:
    timestamps = [at(0, 8), at(0, 9), at(0, 23), at(1, 1), at(1, 2)]

    assert current_streak(timestamps, NOW) == 2


def test_current_streak_accepts_unsorted_input() -> None:
    assert current_streak([at(2), at(0), at(1)], NOW) == 3


def test_current_streak_accepts_dates() -> None:
    assert current_streak([TODAY, TODAY - timedelta(days=1)], TODAY) == 2


# ============ highest_streak ============


def test_highest_streak_empty() -> None:
    assert highest_streak([]) == 0


def test_highest_streak_single_event() -> None:
    assert highest_streak([at(10)]) == 1


def test_highest_streak_two_runs() -> None:
    d = date(2025, 1, 1)
    days = [d, d + timedelta(days=1), d + timedelta(days=2), d + timedelta(days=5), d + timedelta(days=6)]

    assert highest_streak(days) == 3


def test_highest_streak_ignores_duplicates() -> None:
    assert highest_streak([at(3, 9), at(3, 18), at(2), at(2), at(1)]) == 3


def test_highest_streak_can_exceed_current() -> None:
    timestamps = [at(d) for d in (0, 10, 11, 12, 13)]

    assert current_streak(timestamps, NOW) == 1
    assert highest_streak(timestamps) == 4


def test_summarize_streaks_keeps_highest_at_least_current() -> None:
    timestamps = [at(d) for d in (0, 1, 2)]

    assert summarize_streaks(timestamps, NOW) == StreakSummary(current=3, highest=3)
    assert summarize_streaks([], NOW) == StreakSummary(current=0, highest=0)


# ============ activity_histogram ============


def test_activity_histogram_empty() -> None:
    assert activity_histogram([], NOW, 7) == {}


def test_activity_histogram_counts_every_event() -> None:
    timestamps = [at(0, 8), at(0, 9), at(0, 10), at(2), at(6), at(7), at(30)]

    histogram = activity_histogram(timestamps, NOW, 7)

    assert histogram == {
        TODAY: 3,
        TODAY - timedelta(days=2): 1,
        TODAY - timedelta(days=6): 1,
    }


def test_activity_histogram_excludes_future_days() -> None:
    tomorrow = NOW + timedelta(days=1)

    assert activity_histogram([tomorrow], NOW, 7) == {}


@pytest.mark.parametrize("window", [0, -3])
def test_activity_histogram_rejects_bad_window(window: int) -> None:
    with pytest.raises(InvalidArgument):
        activity_histogram([at(0)], NOW, window)


@pytest.mark.parametrize("window", [1_000_000, 10**12])
def test_activity_histogram_rejects_window_before_calendar_start(window: int) -> None:
    with pytest.raises(InvalidArgument):
        activity_histogram([at(0)], NOW, window)
    with pytest.raises(InvalidArgument):
        fill_activity_window({}, NOW, window)


def test_window_may_start_on_first_calendar_day() -> None:
    third_day = date.min + timedelta(days=2)

    assert activity_histogram([date.min], third_day, 3) == {date.min: 1}
    assert window_bounds(third_day, 3) == (date.min, third_day)
    with pytest.raises(InvalidArgument):
        window_bounds(third_day, 4)


def test_fill_activity_window_zero_fills_oldest_first() -> None:
    histogram = {TODAY: 2, TODAY - timedelta(days=2): 1}

    window = fill_activity_window(histogram, NOW, 3)

    assert window == [
        ActivityDay(day=TODAY - timedelta(days=2), count=1),
        ActivityDay(day=TODAY - timedelta(days=1), count=0),
        ActivityDay(day=TODAY, count=2),
    ]


def test_engine_functions_are_idempotent() -> None:
    timestamps = [at(d) for d in (0, 0, 1, 4, 5)]

    assert current_streak(timestamps, NOW) == current_streak(timestamps, NOW)
    assert highest_streak(timestamps) == highest_streak(timestamps)
    assert activity_histogram(timestamps, NOW, 7) == activity_histogram(timestamps, NOW, 7)


# ============ Day boundary ============


def test_midnight_belongs_to_the_day_it_starts() -> None:
    midnight = datetime(2025, 3, 10, 0, 0, tzinfo=timezone.utc)
    just_before = midnight - timedelta(microseconds=1)

    for _ in range(3):
        assert activity_histogram([midnight, just_before], NOW, 7) == {
            date(2025, 3, 10): 1,
            date(2025, 3, 9): 1,
        }


def test_timezone_moves_day_boundary() -> None:
    bucharest = ZoneInfo("Europe/Bucharest")  # UTC+2 в марте
    # 23:30 UTC 8 марта = 01:30 9 марта в Бухаресте
    late = datetime(2025, 3, 8, 23, 30, tzinfo=timezone.utc)
    now = datetime(2025, 3, 9, 12, 0, tzinfo=timezone.utc)

    assert current_streak([late], now, timezone.utc) == 1  # вчера по UTC
    assert current_streak([late], now, bucharest) == 1  # сегодня по Бухаресту
    assert activity_histogram([late], now, 1, timezone.utc) == {}
    assert activity_histogram([late], now, 1, bucharest) == {date(2025, 3, 9): 1}


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = datetime(2025, 3, 10, 0, 30)

    assert activity_histogram([naive], NOW, 1) == {date(2025, 3, 10): 1}
