"""Spaced-repetition scheduling helpers for flashcard and session reviews."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional


DEFAULT_EASE_FACTOR = 2.5
DEFAULT_INTERVAL_DAYS = 1
MIN_EASE_FACTOR = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
MISSED_SESSION_PENALTY = 0.2


@dataclass(slots=True)
class ReviewSchedule:
    """Calculated review data for an item after receiving a quality rating."""

    next_review_at: datetime
    interval_days: int
    repetitions: int
    ease_factor: float


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_next_review(
    quality: int,
    repetitions: Optional[int] = 0,
    interval_days: Optional[int] = DEFAULT_INTERVAL_DAYS,
    ease_factor: Optional[float] = DEFAULT_EASE_FACTOR,
    *,
    now: Optional[datetime] = None,
) -> ReviewSchedule:
    """Return the next review schedule using the SM-2 algorithm.

    Quality is clamped to the 0-5 range instead of being rejected. Missing
    state falls back to the initial values of a fresh item, negative
    repetitions count as zero and intervals never drop below one day.
    Growing intervals are rounded half up.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    quality = max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))
    repetitions = max(0, repetitions or 0)
    interval = max(DEFAULT_INTERVAL_DAYS, interval_days or DEFAULT_INTERVAL_DAYS)
    if ease_factor is None:
        ease_factor = DEFAULT_EASE_FACTOR

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval = 1
    else:
        if repetitions == 0:
            interval = 1
        elif repetitions == 1:
            interval = 6
        else:
            interval = max(1, _round_half_up(interval * ease_factor))
        repetitions += 1

    ease_factor += 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
    if ease_factor < MIN_EASE_FACTOR:
        ease_factor = MIN_EASE_FACTOR

    return ReviewSchedule(
        next_review_at=now + timedelta(days=interval),
        interval_days=interval,
        repetitions=repetitions,
        ease_factor=ease_factor,
    )


def is_due(next_review_at: Optional[datetime], as_of: date) -> bool:
    """Return whether an item should be reviewed on the given calendar day."""
    if next_review_at is None:
        return True
    return next_review_at.date() <= as_of


def penalize_ease(ease_factor: Optional[float]) -> float:
    """Lower the ease factor of an item whose scheduled session was missed."""
    if ease_factor is None:
        ease_factor = DEFAULT_EASE_FACTOR
    return max(ease_factor - MISSED_SESSION_PENALTY, MIN_EASE_FACTOR)
