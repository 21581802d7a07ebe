"""Consecutive-day study streaks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Union


@dataclass(slots=True)
class StreakSummary:
    current_streak: int
    longest_streak: int


def calculate_streak(completed: Iterable[Union[date, datetime]], today: date) -> StreakSummary:
    """Return current and longest streaks of days with a completed session.

    Several sessions on the same day count once. The current streak is only
    alive when the most recent study day is today or yesterday.
    """
    days = sorted({value.date() if isinstance(value, datetime) else value for value in completed})
    if not days:
        return StreakSummary(current_streak=0, longest_streak=0)

    longest = 1
    running = 1
    for previous, current in zip(days, days[1:]):
        if (current - previous).days == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)

    last_day = days[-1]
    current_streak = running if last_day in {today, today - timedelta(days=1)} else 0
    return StreakSummary(current_streak=current_streak, longest_streak=longest)
