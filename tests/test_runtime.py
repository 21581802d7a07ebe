from __future__ import annotations

import argparse
from datetime import date, datetime, timedelta, timezone

import pytest

from src.app.runtime import execute
from src.app.settings import AppSettings
from src.db.flashcards import FlashcardPayload, add_flashcards
from src.db.materials import create_material
from src.db.users import create_user
from src.services import SchedulerService


SETTINGS = AppSettings(
    app_name="Study Planner",
    app_env="test",
    log_level="INFO",
    default_daily_study_minutes=90,
    plan_horizon_days=3,
)


@pytest.mark.asyncio
async def test_plan_command_uses_configured_horizon(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            user = await create_user(session, "Lee", 60)

    service = SchedulerService(session_factory)
    result = await execute(service, SETTINGS, argparse.Namespace(command="plan", user_id=user.id, days=None))

    assert len(result) == 3
    assert all(day["sessions"] == [] for day in result)
    assert date.fromisoformat(result[0]["date"])


@pytest.mark.asyncio
async def test_streak_command_returns_plain_dict(scheduler_service) -> None:
    result = await execute(scheduler_service, SETTINGS, argparse.Namespace(command="streak", user_id=1))

    assert result == {"current_streak": 0, "longest_streak": 0}


@pytest.mark.asyncio
async def test_unknown_command_is_rejected(scheduler_service) -> None:
    with pytest.raises(ValueError):
        await execute(scheduler_service, SETTINGS, argparse.Namespace(command="teleport"))


@pytest.mark.asyncio
async def test_due_command_lists_only_due_cards(session_factory, scheduler_service) -> None:
    now = datetime.now(timezone.utc)
    async with session_factory() as session:
        async with session.begin():
            user = await create_user(session, "Kim", 60)
            material = await create_material(session, user.id, "Cell notes", "Biology", "Cells")
            due, later = await add_flashcards(
                session,
                material,
                [FlashcardPayload("Nucleus?", "Control centre"), FlashcardPayload("Ribosome?", "Protein")],
                now=now - timedelta(hours=1),
            )
            later.next_review_at = now + timedelta(days=3)

    result = await execute(
        scheduler_service, SETTINGS, argparse.Namespace(command="due", user_id=user.id)
    )

    assert [item["flashcard_id"] for item in result] == [due.id]
    assert result[0]["subject"] == "Biology"
    assert result[0]["question"] == "Nucleus?"


@pytest.mark.asyncio
async def test_plan_command_honours_explicit_horizon(session_factory, scheduler_service) -> None:
    async with session_factory() as session:
        async with session.begin():
            user = await create_user(session, "Lee", 60)

    result = await execute(
        scheduler_service, SETTINGS, argparse.Namespace(command="plan", user_id=user.id, days=1)
    )

    assert len(result) == 1


@pytest.mark.asyncio
async def test_quiz_gaps_and_velocity_commands(session_factory, scheduler_service) -> None:
    async with session_factory() as session:
        async with session.begin():
            user = await create_user(session, "Ari", 60)

    for accuracy in (50.0, 70.0):
        quiz = await execute(
            scheduler_service,
            SETTINGS,
            argparse.Namespace(
                command="quiz",
                user_id=user.id,
                subject="Math",
                topic="Algebra" if accuracy < 60 else "Geometry",
                accuracy=accuracy,
                time_spent=90,
            ),
        )
        assert quiz["quizzes_taken"] == 1
        assert quiz["quiz_accuracy"] == accuracy

    gaps = await execute(scheduler_service, SETTINGS, argparse.Namespace(command="gaps", user_id=user.id))
    assert gaps == [{"subject": "Math", "topic": "Algebra", "avg_accuracy": 50.0, "study_minutes": 2}]

    velocity = await execute(
        scheduler_service,
        SETTINGS,
        argparse.Namespace(command="velocity", user_id=user.id, subject="Math", days=None),
    )
    assert velocity == {"subject": "Math", "days": 7, "velocity": 60.0}


@pytest.mark.asyncio
async def test_create_and_delete_session_commands(session_factory, scheduler_service) -> None:
    async with session_factory() as session:
        async with session.begin():
            user = await create_user(session, "Sam", 60)

    created = await execute(
        scheduler_service,
        SETTINGS,
        argparse.Namespace(
            command="create-session",
            user_id=user.id,
            subject="History",
            topic="Rome",
            at=datetime(2026, 3, 11, 9, tzinfo=timezone.utc),
            minutes=30,
            type="reading",
            material_id=None,
        ),
    )
    assert created["status"] == "scheduled"

    deleted = await execute(
        scheduler_service, SETTINGS, argparse.Namespace(command="delete-session", session_id=created["id"])
    )
    assert deleted == {"id": created["id"], "deleted": True}

    with pytest.raises(LookupError):
        await execute(
            scheduler_service, SETTINGS, argparse.Namespace(command="delete-session", session_id=created["id"])
        )
