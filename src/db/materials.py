"""Helpers for reading and updating study materials."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.scheduling.planner import MaterialRef, ReviewItem

from . import Flashcard, Material, as_utc


async def create_material(
    session: AsyncSession,
    user_id: int,
    title: str,
    subject: str,
    topic: str,
    estimated_read_minutes: Optional[int] = None,
    last_studied_at: Optional[datetime] = None,
) -> Material:
    """Insert a study material for a user."""
    material = Material(
        user_id=user_id,
        title=title.strip(),
        subject=subject.strip(),
        topic=topic.strip(),
        estimated_read_minutes=estimated_read_minutes,
        last_studied_at=last_studied_at,
    )
    session.add(material)
    await session.flush()
    return material


async def list_material_refs(session: AsyncSession, user_id: int) -> List[MaterialRef]:
    """Return planning snapshots of every material the user owns."""
    stmt = select(Material).where(Material.user_id == user_id).order_by(Material.id)
    materials = (await session.execute(stmt)).scalars().all()

    return [
        MaterialRef(
            id=material.id,
            subject=material.subject,
            topic=material.topic,
            last_studied_at=as_utc(material.last_studied_at),
            estimated_read_minutes=material.estimated_read_minutes,
        )
        for material in materials
    ]


async def list_review_items(session: AsyncSession, user_id: int) -> List[ReviewItem]:
    """Return the review state of every flashcard the user owns."""
    stmt = (
        select(Material.id, Material.subject, Material.topic, Flashcard.next_review_at)
        .join(Flashcard, Flashcard.material_id == Material.id)
        .where(Material.user_id == user_id)
        .order_by(Material.id, Flashcard.id)
    )
    result = await session.execute(stmt)
    return [
        ReviewItem(
            material_id=material_id,
            subject=subject,
            topic=topic,
            next_review_at=as_utc(next_review_at),
        )
        for material_id, subject, topic, next_review_at in result.all()
    ]


async def mark_material_studied(
    session: AsyncSession, material_id: int, now: Optional[datetime] = None
) -> None:
    """Record that a material was just studied."""
    if now is None:
        now = datetime.now(timezone.utc)

    material = await session.get(Material, material_id)
    if material is None:
        return
    material.last_studied_at = now
    await session.flush()
