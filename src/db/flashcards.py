"""Helpers for working with flashcard persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.scheduling.srs import DEFAULT_EASE_FACTOR, DEFAULT_INTERVAL_DAYS, ReviewSchedule

from . import Flashcard, FlashcardReview, Material


@dataclass(slots=True)
class FlashcardPayload:
    """Question/answer pair to attach to a material."""

    question: str
    answer: str

    def normalized(self) -> "FlashcardPayload":
        """Return a payload with leading/trailing whitespace stripped."""
        return FlashcardPayload(question=self.question.strip(), answer=self.answer.strip())


async def add_flashcards(
    session: AsyncSession,
    material: Material,
    payloads: Sequence[FlashcardPayload],
    now: Optional[datetime] = None,
) -> List[Flashcard]:
    """Attach new cards to a material, due for review immediately."""
    if now is None:
        now = datetime.now(timezone.utc)

    flashcards = []
    for payload in payloads:
        normalized = payload.normalized()
        if not normalized.question or not normalized.answer:
            continue
        flashcards.append(
            Flashcard(
                material_id=material.id,
                question=normalized.question,
                answer=normalized.answer,
                repetitions=0,
                interval_days=DEFAULT_INTERVAL_DAYS,
                ease_factor=DEFAULT_EASE_FACTOR,
                next_review_at=now,
            )
        )
    session.add_all(flashcards)
    await session.flush()
    return flashcards


async def get_flashcard(session: AsyncSession, flashcard_id: int) -> Optional[Flashcard]:
    """Load a flashcard together with its material."""
    stmt = (
        select(Flashcard)
        .options(selectinload(Flashcard.material))
        .where(Flashcard.id == flashcard_id)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def list_due_flashcards(
    session: AsyncSession,
    user_id: int,
    now: Optional[datetime] = None,
) -> List[Flashcard]:
    """Return the user's cards that are due, oldest due date first."""
    if now is None:
        now = datetime.now(timezone.utc)

    stmt = (
        select(Flashcard)
        .options(selectinload(Flashcard.material))
        .join(Material, Material.id == Flashcard.material_id)
        .where(
            Material.user_id == user_id,
            (Flashcard.next_review_at.is_(None)) | (Flashcard.next_review_at <= now),
        )
        .order_by(Flashcard.next_review_at, Flashcard.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def record_flashcard_review(
    session: AsyncSession,
    flashcard: Flashcard,
    quality: int,
    schedule: ReviewSchedule,
    now: Optional[datetime] = None,
) -> None:
    """Persist a spaced-repetition review outcome for the given flashcard."""
    if now is None:
        now = datetime.now(timezone.utc)

    flashcard.last_quality = quality
    flashcard.next_review_at = schedule.next_review_at
    flashcard.interval_days = schedule.interval_days
    flashcard.repetitions = schedule.repetitions
    flashcard.ease_factor = schedule.ease_factor

    session.add(
        FlashcardReview(
            flashcard_id=flashcard.id,
            quality=quality,
            reviewed_at=now,
        )
    )
    await session.flush()
