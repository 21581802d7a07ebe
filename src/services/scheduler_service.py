"""Data-access adapter around the pure scheduling core."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db import Flashcard, ProgressEntry, StudySession, as_utc
from src.db.flashcards import get_flashcard, list_due_flashcards, record_flashcard_review
from src.db.materials import list_material_refs, list_review_items, mark_material_studied
from src.db.progress import list_progress_since, record_progress
from src.db.sessions import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_MISSED,
    STATUS_SCHEDULED,
    create_study_session,
    get_study_session,
    list_completed_session_dates,
    list_existing_sessions,
    list_rated_sessions,
)
from src.db.users import get_user_profile
from src.scheduling.insights import (
    GAP_WINDOW_DAYS,
    VELOCITY_WINDOW_DAYS,
    StudyHour,
    calculate_velocity,
    identify_gaps,
    optimal_study_hours,
)
from src.scheduling.planner import DailyPlan, WeakTopic, build_schedule
from src.scheduling.srs import ReviewSchedule, calculate_next_review, penalize_ease
from src.scheduling.streak import StreakSummary, calculate_streak


LOGGER = logging.getLogger(__name__)

DEFAULT_DAILY_STUDY_MINUTES = 120
DEFAULT_PRODUCTIVITY = 3
RESCHEDULE_HOUR = 9


@dataclass(slots=True)
class FlashcardReviewResult:
    """Outcome of grading a flashcard."""

    flashcard_id: int
    quality: int
    schedule: ReviewSchedule


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class SchedulerService:
    """Loads a user's study data and delegates the decisions to the scheduling core."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        default_daily_minutes: int = DEFAULT_DAILY_STUDY_MINUTES,
    ) -> None:
        self._session_factory = session_factory
        self._default_daily_minutes = default_daily_minutes

    async def generate_schedule(
        self,
        user_id: int,
        horizon_days: int = 7,
        today: Optional[date] = None,
    ) -> List[DailyPlan]:
        """Build a day-by-day plan for the next ``horizon_days`` days."""
        if today is None:
            today = _utc_today()

        start = _start_of_day(today)
        end = start + timedelta(days=max(0, horizon_days))

        async with self._session_factory() as session:
            profile = await get_user_profile(session, user_id)
            materials = await list_material_refs(session, user_id)
            review_items = await list_review_items(session, user_id)
            progress = await list_progress_since(
                session, user_id, today - timedelta(days=GAP_WINDOW_DAYS)
            )
            existing = await list_existing_sessions(session, user_id, start, end)

        if profile is None:
            LOGGER.warning("User %s not found; planning with the default budget.", user_id)
        budget = (profile.daily_study_minutes if profile else None) or self._default_daily_minutes
        weak_topics = identify_gaps(progress, today)

        schedule = build_schedule(
            budget,
            today,
            horizon_days,
            existing,
            review_items,
            weak_topics,
            materials,
        )
        LOGGER.info(
            "Planned %d day(s) for user %s: %d proposal(s), %d weak topic(s).",
            len(schedule),
            user_id,
            sum(len(plan.sessions) for plan in schedule),
            len(weak_topics),
        )
        return schedule

    async def review_flashcard(
        self,
        flashcard_id: int,
        quality: int,
        now: Optional[datetime] = None,
    ) -> FlashcardReviewResult:
        """Grade a flashcard and store its next review date."""
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            async with session.begin():
                flashcard = await get_flashcard(session, flashcard_id)
                if flashcard is None:
                    raise LookupError(f"Flashcard {flashcard_id} not found.")

                schedule = calculate_next_review(
                    quality,
                    flashcard.repetitions,
                    flashcard.interval_days,
                    flashcard.ease_factor,
                    now=now,
                )
                await record_flashcard_review(session, flashcard, quality, schedule, now=now)
                material = flashcard.material
                await record_progress(
                    session,
                    material.user_id,
                    material.subject,
                    material.topic,
                    now.date(),
                    flashcards_reviewed=1,
                )

        LOGGER.debug(
            "Flashcard %s rated %s; next review in %d day(s).",
            flashcard_id,
            quality,
            schedule.interval_days,
        )
        return FlashcardReviewResult(flashcard_id=flashcard_id, quality=quality, schedule=schedule)

    async def get_due_flashcards(self, user_id: int, now: Optional[datetime] = None) -> List[Flashcard]:
        async with self._session_factory() as session:
            return await list_due_flashcards(session, user_id, now=now)

    async def start_session(self, session_id: int, now: Optional[datetime] = None) -> StudySession:
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            async with session.begin():
                study_session = await self._require_session(session, session_id)
                study_session.status = STATUS_IN_PROGRESS
                study_session.started_at = now
        return study_session

    async def complete_session(
        self,
        session_id: int,
        productivity: Optional[int] = None,
        notes: Optional[str] = None,
        quality: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> StudySession:
        """Finish a session, record progress and optionally reschedule its review.

        When ``quality`` is given the session's own review state is advanced
        with the same SM-2 rule used for flashcards.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            async with session.begin():
                study_session = await self._require_session(session, session_id)
                study_session.status = STATUS_COMPLETED
                study_session.ended_at = now
                study_session.productivity = productivity or DEFAULT_PRODUCTIVITY
                study_session.notes = notes or ""

                started_at = as_utc(study_session.started_at)
                if started_at is not None:
                    study_session.actual_minutes = round((now - started_at).total_seconds() / 60)

                if quality is not None:
                    schedule = calculate_next_review(
                        quality,
                        study_session.repetitions,
                        study_session.interval_days,
                        study_session.ease_factor,
                        now=now,
                    )
                    study_session.repetitions = schedule.repetitions
                    study_session.interval_days = schedule.interval_days
                    study_session.ease_factor = schedule.ease_factor
                    study_session.next_review_at = schedule.next_review_at

                await record_progress(
                    session,
                    study_session.user_id,
                    study_session.subject,
                    study_session.topic,
                    now.date(),
                    study_minutes=study_session.actual_minutes or study_session.scheduled_minutes,
                    sessions_completed=1,
                    materials_studied=1 if study_session.material_id else 0,
                )
                if study_session.material_id is not None:
                    await mark_material_studied(session, study_session.material_id, now=now)

        LOGGER.info("Study session %s completed.", session_id)
        return study_session

    async def handle_missed_session(
        self, session_id: int, now: Optional[datetime] = None
    ) -> StudySession:
        """Mark a session as missed and book it again for tomorrow morning."""
        if now is None:
            now = datetime.now(timezone.utc)

        tomorrow = now.date() + timedelta(days=1)
        async with self._session_factory() as session:
            async with session.begin():
                missed = await self._require_session(session, session_id)
                missed.status = STATUS_MISSED

                rescheduled = StudySession(
                    user_id=missed.user_id,
                    material_id=missed.material_id,
                    subject=missed.subject,
                    topic=missed.topic,
                    session_type=missed.session_type,
                    status=STATUS_SCHEDULED,
                    scheduled_at=datetime.combine(
                        tomorrow, time(hour=RESCHEDULE_HOUR), tzinfo=timezone.utc
                    ),
                    scheduled_minutes=missed.scheduled_minutes,
                    repetitions=missed.repetitions,
                    interval_days=missed.interval_days,
                    ease_factor=penalize_ease(missed.ease_factor),
                )
                session.add(rescheduled)
                await session.flush()

        LOGGER.info("Study session %s missed; rescheduled as %s.", session_id, rescheduled.id)
        return rescheduled

    async def get_streak(self, user_id: int, today: Optional[date] = None) -> StreakSummary:
        if today is None:
            today = _utc_today()

        async with self._session_factory() as session:
            completed = await list_completed_session_dates(session, user_id)
        return calculate_streak(completed, today)

    async def get_optimal_study_times(self, user_id: int) -> List[StudyHour]:
        async with self._session_factory() as session:
            rated = await list_rated_sessions(session, user_id)
        return optimal_study_hours(rated)

    async def record_quiz_result(
        self,
        user_id: int,
        subject: str,
        topic: Optional[str],
        accuracy: float,
        time_spent_seconds: int = 0,
        now: Optional[datetime] = None,
    ) -> ProgressEntry:
        """Store a graded quiz in the day's progress so weak topics can be found.

        Accuracy is a percentage clamped to 0-100. Time spent counts towards
        study minutes, rounded up.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        accuracy = max(0.0, min(100.0, float(accuracy)))
        async with self._session_factory() as session:
            async with session.begin():
                entry = await record_progress(
                    session,
                    user_id,
                    subject,
                    topic,
                    now.date(),
                    quizzes_taken=1,
                    quiz_accuracy=accuracy,
                    study_minutes=math.ceil(max(0, time_spent_seconds) / 60),
                )

        LOGGER.info("Quiz on %s/%s recorded for user %s at %.1f%%.", subject, topic, user_id, accuracy)
        return entry

    async def create_session(
        self,
        user_id: int,
        subject: str,
        topic: str,
        scheduled_at: datetime,
        duration_minutes: int,
        session_type: str = "practice",
        material_id: Optional[int] = None,
    ) -> StudySession:
        """Book a study session by hand."""
        subject = subject.strip()
        topic = topic.strip()
        if not subject or not topic:
            raise ValueError("Subject and topic are required to schedule a session.")
        if duration_minutes < 1:
            raise ValueError("Session duration must be a positive number of minutes.")

        async with self._session_factory() as session:
            async with session.begin():
                study_session = await create_study_session(
                    session,
                    user_id,
                    subject,
                    topic,
                    as_utc(scheduled_at),
                    duration_minutes,
                    session_type=session_type,
                    material_id=material_id,
                )

        LOGGER.info("Study session %s scheduled for user %s.", study_session.id, user_id)
        return study_session

    async def delete_session(self, session_id: int) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                study_session = await self._require_session(session, session_id)
                await session.delete(study_session)
        LOGGER.info("Study session %s deleted.", session_id)

    async def get_knowledge_gaps(self, user_id: int, today: Optional[date] = None) -> List[WeakTopic]:
        if today is None:
            today = _utc_today()

        async with self._session_factory() as session:
            progress = await list_progress_since(
                session, user_id, today - timedelta(days=GAP_WINDOW_DAYS)
            )
        return identify_gaps(progress, today)

    async def get_learning_velocity(
        self,
        user_id: int,
        subject: Optional[str] = None,
        days: int = VELOCITY_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> float:
        """Return the average quiz accuracy of a subject over recent days."""
        if today is None:
            today = _utc_today()

        async with self._session_factory() as session:
            progress = await list_progress_since(session, user_id, today - timedelta(days=days))
        return calculate_velocity(progress, subject, today, days)

    async def _require_session(self, session: AsyncSession, session_id: int) -> StudySession:
        study_session = await get_study_session(session, session_id)
        if study_session is None:
            raise LookupError(f"Study session {session_id} not found.")
        return study_session

