"""Progress analytics that feed the planner."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from .planner import WeakTopic


GAP_WINDOW_DAYS = 30
GAP_ACCURACY_THRESHOLD = 70.0
VELOCITY_WINDOW_DAYS = 7
DEFAULT_TOPIC = "general"


@dataclass(slots=True)
class ProgressSnapshot:
    """One day of aggregated study activity for a subject/topic."""

    subject: str
    topic: Optional[str]
    day: date
    quizzes_taken: int = 0
    quiz_accuracy: Optional[float] = None
    study_minutes: int = 0


@dataclass(slots=True)
class CompletedSessionSnapshot:
    started_at: Optional[datetime]
    productivity: Optional[int]


@dataclass(slots=True)
class StudyHour:
    hour: int
    avg_productivity: float


@dataclass(slots=True)
class _GapAccumulator:
    subject: str
    topic: str
    entries: int = 0
    quizzes: int = 0
    accuracy_total: float = 0.0
    study_minutes: int = 0


def identify_gaps(
    entries: Iterable[ProgressSnapshot],
    as_of: date,
    window_days: int = GAP_WINDOW_DAYS,
    threshold: float = GAP_ACCURACY_THRESHOLD,
) -> List[WeakTopic]:
    """Return weak topics from recent progress, worst accuracy first.

    Accuracy is averaged over every entry of a topic in the window, including
    days without quizzes, and topics that were never quizzed are ignored.
    """
    since = as_of - timedelta(days=window_days)
    groups: Dict[tuple[str, str], _GapAccumulator] = {}
    for entry in entries:
        if entry.day < since:
            continue
        topic = entry.topic or DEFAULT_TOPIC
        key = (entry.subject, topic)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _GapAccumulator(subject=entry.subject, topic=topic)
        group.entries += 1
        group.quizzes += entry.quizzes_taken
        group.accuracy_total += entry.quiz_accuracy or 0.0
        group.study_minutes += entry.study_minutes

    gaps = [
        WeakTopic(
            subject=group.subject,
            topic=group.topic,
            avg_accuracy=group.accuracy_total / group.entries,
            study_minutes=group.study_minutes,
        )
        for group in groups.values()
        if group.quizzes > 0
    ]
    gaps = [gap for gap in gaps if gap.avg_accuracy < threshold]
    gaps.sort(key=lambda gap: gap.avg_accuracy)
    return gaps


def optimal_study_hours(
    sessions: Iterable[CompletedSessionSnapshot], limit: int = 3
) -> List[StudyHour]:
    """Rank start hours of completed sessions by average productivity."""
    totals: Dict[int, List[int]] = {}
    for session in sessions:
        if session.started_at is None or session.productivity is None:
            continue
        totals.setdefault(session.started_at.hour, []).append(session.productivity)

    hours = [
        StudyHour(hour=hour, avg_productivity=sum(values) / len(values))
        for hour, values in totals.items()
    ]
    hours.sort(key=lambda item: item.avg_productivity, reverse=True)
    return hours[:limit]


def calculate_velocity(
    entries: Iterable[ProgressSnapshot],
    subject: Optional[str],
    as_of: date,
    days: int = VELOCITY_WINDOW_DAYS,
) -> float:
    """Average quiz accuracy of a subject over the last ``days`` days.

    Fewer than two entries in the window yield 0.0. Without a subject every
    entry in the window counts.
    """
    since = as_of - timedelta(days=days)
    window = [
        entry
        for entry in entries
        if entry.day >= since and (subject is None or entry.subject == subject)
    ]
    if len(window) < 2:
        return 0.0
    return sum(entry.quiz_accuracy or 0.0 for entry in window) / len(window)
