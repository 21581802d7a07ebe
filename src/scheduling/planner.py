"""Daily study-session planning over a user's time budget."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .srs import is_due


FLASHCARD_MIN_MINUTES = 15
FLASHCARD_MAX_MINUTES = 30
PRACTICE_MIN_MINUTES = 20
PRACTICE_MAX_MINUTES = 45
READING_MIN_MINUTES = 20
DEFAULT_READING_MINUTES = 30
WEAK_TOPIC_LIMIT = 3
STALE_AFTER_DAYS = 3

SESSION_FLASHCARDS = "flashcards"
SESSION_PRACTICE = "practice"
SESSION_READING = "reading"
PRIORITY_HIGH = "high"
PRIORITY_MEDIUM = "medium"


@dataclass(slots=True)
class WeakTopic:
    """Subject/topic pair whose recent quiz accuracy is below target."""

    subject: str
    topic: str
    avg_accuracy: float
    study_minutes: int = 0


@dataclass(slots=True)
class MaterialRef:
    """Snapshot of a study material relevant to planning."""

    id: int
    subject: str
    topic: str
    last_studied_at: Optional[datetime] = None
    estimated_read_minutes: Optional[int] = None


@dataclass(slots=True)
class ReviewItem:
    """Review state of a single flashcard, tagged with its material."""

    material_id: int
    subject: str
    topic: str
    next_review_at: Optional[datetime] = None


@dataclass(slots=True)
class DueReview:
    """Flashcards of one material that are due on a given day."""

    material_id: int
    subject: str
    topic: str
    due_count: int


@dataclass(slots=True)
class ExistingSession:
    """An already scheduled session occupying part of a day's budget."""

    scheduled_at: datetime
    duration_minutes: int


@dataclass(slots=True)
class SessionProposal:
    """Time-boxed study session suggested by the planner."""

    type: str
    subject: str
    topic: str
    duration_minutes: int
    priority: str
    reason: str
    material_id: Optional[int] = None

    @property
    def subject_topic(self) -> str:
        return f"{self.subject}: {self.topic}"


@dataclass(slots=True)
class DailyPlan:
    """Ordered session proposals for one calendar day."""

    date: date
    sessions: List[SessionProposal] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(session.duration_minutes for session in self.sessions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "sessions": [asdict(session) for session in self.sessions],
        }


def _format_accuracy(value: float) -> str:
    return f"{round(value, 1):g}"


def _days_between(earlier: datetime, as_of: date) -> int:
    return abs((as_of - earlier.date()).days)


def _reading_minutes(material: MaterialRef) -> int:
    estimate = material.estimated_read_minutes
    if estimate is None or estimate <= 0:
        return DEFAULT_READING_MINUTES
    return estimate


def is_stale(material: MaterialRef, as_of: date) -> bool:
    """Return whether a material has gone unstudied for long enough to revisit."""
    if material.last_studied_at is None:
        return True
    return _days_between(material.last_studied_at, as_of) > STALE_AFTER_DAYS


def collect_due_reviews(items: Iterable[ReviewItem], as_of: date) -> List[DueReview]:
    """Group review items by material, keeping materials with due cards."""
    groups: Dict[int, DueReview] = {}
    for item in items:
        group = groups.get(item.material_id)
        if group is None:
            group = DueReview(
                material_id=item.material_id,
                subject=item.subject,
                topic=item.topic,
                due_count=0,
            )
            groups[item.material_id] = group
        if is_due(item.next_review_at, as_of):
            group.due_count += 1
    return [group for group in groups.values() if group.due_count > 0]


def plan_day(
    daily_budget_minutes: int,
    existing_sessions: Sequence[ExistingSession],
    due_reviews: Sequence[DueReview],
    weak_topics: Sequence[WeakTopic],
    materials: Sequence[MaterialRef],
    as_of: date,
) -> List[SessionProposal]:
    """Allocate the free part of a day's budget across prioritised study work.

    Due reviews come first, then up to three weak topics (in the order given,
    worst first) and finally materials that have not been studied recently.
    Each tier stops once the remaining minutes fall below its floor. The
    returned proposals never include ``existing_sessions``; callers merge
    them for a full view of the day.
    """
    booked = sum(max(0, session.duration_minutes) for session in existing_sessions)
    remaining = max(0, daily_budget_minutes) - booked
    if remaining <= 0:
        return []

    proposals: List[SessionProposal] = []

    for review in due_reviews:
        if remaining < FLASHCARD_MIN_MINUTES:
            break
        duration = min(FLASHCARD_MAX_MINUTES, remaining)
        proposals.append(
            SessionProposal(
                type=SESSION_FLASHCARDS,
                subject=review.subject,
                topic=review.topic,
                duration_minutes=duration,
                priority=PRIORITY_HIGH,
                reason="Spaced repetition review",
                material_id=review.material_id,
            )
        )
        remaining -= duration

    for weak in weak_topics[:WEAK_TOPIC_LIMIT]:
        if remaining < PRACTICE_MIN_MINUTES:
            break
        material = next(
            (m for m in materials if m.subject == weak.subject and m.topic == weak.topic),
            None,
        )
        if material is None:
            continue
        duration = min(PRACTICE_MAX_MINUTES, remaining)
        proposals.append(
            SessionProposal(
                type=SESSION_PRACTICE,
                subject=weak.subject,
                topic=weak.topic,
                duration_minutes=duration,
                priority=PRIORITY_HIGH,
                reason=f"Weak area: {_format_accuracy(weak.avg_accuracy)}% accuracy",
                material_id=material.id,
            )
        )
        remaining -= duration

    planned_ids = {proposal.material_id for proposal in proposals}
    for material in materials:
        if remaining < READING_MIN_MINUTES:
            break
        if material.id in planned_ids or not is_stale(material, as_of):
            continue
        duration = min(_reading_minutes(material), remaining)
        proposals.append(
            SessionProposal(
                type=SESSION_READING,
                subject=material.subject,
                topic=material.topic,
                duration_minutes=duration,
                priority=PRIORITY_MEDIUM,
                reason="Regular study session",
                material_id=material.id,
            )
        )
        remaining -= duration

    return proposals


def build_schedule(
    daily_budget_minutes: int,
    start: date,
    horizon_days: int,
    existing_sessions: Sequence[ExistingSession],
    review_items: Sequence[ReviewItem],
    weak_topics: Sequence[WeakTopic],
    materials: Sequence[MaterialRef],
) -> List[DailyPlan]:
    """Plan every day of the horizon starting at ``start``.

    Weak topics and materials are a single snapshot for the whole horizon, so
    material staleness is judged against ``start`` on every day.
    """
    schedule: List[DailyPlan] = []
    for offset in range(max(0, horizon_days)):
        day = start + timedelta(days=offset)
        booked = [s for s in existing_sessions if s.scheduled_at.date() == day]
        sessions = plan_day(
            daily_budget_minutes,
            booked,
            collect_due_reviews(review_items, day),
            weak_topics,
            materials,
            start,
        )
        schedule.append(DailyPlan(date=day, sessions=sessions))
    return schedule
