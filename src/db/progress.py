"""Daily progress aggregates per subject and topic."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.scheduling.insights import DEFAULT_TOPIC, ProgressSnapshot

from . import ProgressEntry


async def record_progress(
    session: AsyncSession,
    user_id: int,
    subject: str,
    topic: Optional[str],
    day: date,
    *,
    study_minutes: int = 0,
    sessions_completed: int = 0,
    quizzes_taken: int = 0,
    quiz_accuracy: Optional[float] = None,
    flashcards_reviewed: int = 0,
    materials_studied: int = 0,
) -> ProgressEntry:
    """Increment the counters of a day's entry, creating it when missing."""
    topic = topic or DEFAULT_TOPIC
    stmt = select(ProgressEntry).where(
        ProgressEntry.user_id == user_id,
        ProgressEntry.subject == subject,
        ProgressEntry.topic == topic,
        ProgressEntry.day == day,
    )
    entry = (await session.execute(stmt)).scalars().first()
    if entry is None:
        entry = ProgressEntry(
            user_id=user_id,
            subject=subject,
            topic=topic,
            day=day,
            study_minutes=0,
            sessions_completed=0,
            quizzes_taken=0,
            flashcards_reviewed=0,
            materials_studied=0,
        )
        session.add(entry)

    entry.study_minutes += study_minutes
    entry.sessions_completed += sessions_completed
    entry.quizzes_taken += quizzes_taken
    entry.flashcards_reviewed += flashcards_reviewed
    entry.materials_studied += materials_studied
    if quiz_accuracy is not None:
        entry.quiz_accuracy = quiz_accuracy

    await session.flush()
    return entry


async def list_progress_since(session: AsyncSession, user_id: int, since: date) -> List[ProgressSnapshot]:
    stmt = (
        select(ProgressEntry)
        .where(ProgressEntry.user_id == user_id, ProgressEntry.day >= since)
        .order_by(ProgressEntry.day, ProgressEntry.id)
    )
    entries = (await session.execute(stmt)).scalars().all()
    return [
        ProgressSnapshot(
            subject=entry.subject,
            topic=entry.topic,
            day=entry.day,
            quizzes_taken=entry.quizzes_taken,
            quiz_accuracy=entry.quiz_accuracy,
            study_minutes=entry.study_minutes,
        )
        for entry in entries
    ]
