"""Helpers for study-session persistence."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.scheduling.insights import CompletedSessionSnapshot
from src.scheduling.planner import ExistingSession

from . import StudySession, as_utc


STATUS_SCHEDULED = "scheduled"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUS_MISSED = "missed"
SESSION_TYPES = frozenset({"reading", "practice", "review", "flashcards"})


async def create_study_session(
    session: AsyncSession,
    user_id: int,
    subject: str,
    topic: str,
    scheduled_at: datetime,
    scheduled_minutes: int,
    session_type: str = "practice",
    material_id: Optional[int] = None,
) -> StudySession:
    """Schedule a new study session."""
    if session_type not in SESSION_TYPES:
        raise ValueError(f"Unknown session type: {session_type}")

    study_session = StudySession(
        user_id=user_id,
        material_id=material_id,
        subject=subject,
        topic=topic,
        session_type=session_type,
        status=STATUS_SCHEDULED,
        scheduled_at=scheduled_at,
        scheduled_minutes=scheduled_minutes,
    )
    session.add(study_session)
    await session.flush()
    return study_session


async def get_study_session(session: AsyncSession, session_id: int) -> Optional[StudySession]:
    return await session.get(StudySession, session_id)


async def list_existing_sessions(
    session: AsyncSession,
    user_id: int,
    start: datetime,
    end: datetime,
) -> List[ExistingSession]:
    """Return sessions scheduled in ``[start, end)`` as planner inputs."""
    stmt = (
        select(StudySession.scheduled_at, StudySession.scheduled_minutes)
        .where(
            StudySession.user_id == user_id,
            StudySession.scheduled_at >= start,
            StudySession.scheduled_at < end,
        )
        .order_by(StudySession.scheduled_at, StudySession.id)
    )
    result = await session.execute(stmt)
    return [
        ExistingSession(scheduled_at=as_utc(scheduled_at), duration_minutes=minutes)
        for scheduled_at, minutes in result.all()
    ]


async def list_completed_session_dates(session: AsyncSession, user_id: int) -> List[datetime]:
    """Return scheduled timestamps of completed sessions, oldest first."""
    stmt = (
        select(StudySession.scheduled_at)
        .where(StudySession.user_id == user_id, StudySession.status == STATUS_COMPLETED)
        .order_by(StudySession.scheduled_at)
    )
    result = await session.execute(stmt)
    return [as_utc(value) for value in result.scalars().all()]


async def list_rated_sessions(session: AsyncSession, user_id: int) -> List[CompletedSessionSnapshot]:
    """Return completed sessions that carry a productivity rating."""
    stmt = select(StudySession.started_at, StudySession.productivity).where(
        StudySession.user_id == user_id,
        StudySession.status == STATUS_COMPLETED,
        StudySession.productivity.is_not(None),
    )
    result = await session.execute(stmt)
    return [
        CompletedSessionSnapshot(started_at=as_utc(started_at), productivity=productivity)
        for started_at, productivity in result.all()
    ]
