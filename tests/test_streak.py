from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from src.scheduling.streak import StreakSummary, calculate_streak


TODAY = date(2026, 3, 10)


def _days_ago(days: int, hour: int = 18) -> datetime:
    day = TODAY - timedelta(days=days)
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


def test_consecutive_days_ending_today() -> None:
    summary = calculate_streak([_days_ago(2), _days_ago(1), _days_ago(0)], TODAY)

    assert summary == StreakSummary(current_streak=3, longest_streak=3)


def test_gap_breaks_the_streak() -> None:
    summary = calculate_streak([_days_ago(2), _days_ago(0)], TODAY)

    assert summary.longest_streak == 1
    assert summary.current_streak == 1


def test_streak_ending_yesterday_is_still_current() -> None:
    summary = calculate_streak([_days_ago(3), _days_ago(2), _days_ago(1)], TODAY)

    assert summary == StreakSummary(current_streak=3, longest_streak=3)


def test_old_streak_is_not_current() -> None:
    summary = calculate_streak([_days_ago(9), _days_ago(8), _days_ago(7), _days_ago(5)], TODAY)

    assert summary == StreakSummary(current_streak=0, longest_streak=3)


def test_same_day_sessions_count_once() -> None:
    completed = [_days_ago(1, hour=8), _days_ago(1, hour=20), _days_ago(0, hour=7), _days_ago(0, hour=9)]

    summary = calculate_streak(completed, TODAY)

    assert summary == StreakSummary(current_streak=2, longest_streak=2)


def test_unsorted_input_and_plain_dates() -> None:
    completed = [TODAY, TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY - timedelta(days=6)]

    summary = calculate_streak(completed, TODAY)

    assert summary == StreakSummary(current_streak=3, longest_streak=3)


def test_longer_past_streak_is_longest() -> None:
    completed = [_days_ago(d) for d in (20, 19, 18, 17, 1, 0)]

    summary = calculate_streak(completed, TODAY)

    assert summary.current_streak == 2
    assert summary.longest_streak == 4
    assert summary.current_streak <= summary.longest_streak


def test_no_sessions() -> None:
    assert calculate_streak([], TODAY) == StreakSummary(current_streak=0, longest_streak=0)
