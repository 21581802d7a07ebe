"""Bootstrap logic for running planner commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any

from src.app.settings import AppSettings
from src.db import get_session_factory, run_migrations_if_needed
from src.scheduling.insights import VELOCITY_WINDOW_DAYS
from src.services import SchedulerService


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


async def execute(service: SchedulerService, settings: AppSettings, args: argparse.Namespace) -> Any:
    """Run one CLI command against the service and return a JSON-ready result."""
    if args.command == "plan":
        days = args.days if args.days is not None else settings.plan_horizon_days
        schedule = await service.generate_schedule(args.user_id, days)
        return [plan.to_dict() for plan in schedule]
    if args.command == "streak":
        return asdict(await service.get_streak(args.user_id))
    if args.command == "due":
        flashcards = await service.get_due_flashcards(args.user_id)
        return [
            {
                "flashcard_id": card.id,
                "material_id": card.material_id,
                "subject": card.material.subject,
                "topic": card.material.topic,
                "question": card.question,
                "next_review_at": card.next_review_at,
            }
            for card in flashcards
        ]
    if args.command == "review":
        result = await service.review_flashcard(args.flashcard_id, args.quality)
        return {"flashcard_id": result.flashcard_id, **asdict(result.schedule)}
    if args.command == "start":
        study_session = await service.start_session(args.session_id)
        return {"id": study_session.id, "status": study_session.status}
    if args.command == "complete":
        study_session = await service.complete_session(
            args.session_id,
            productivity=args.productivity,
            notes=args.notes,
            quality=args.quality,
        )
        return {
            "id": study_session.id,
            "status": study_session.status,
            "actual_minutes": study_session.actual_minutes,
            "next_review_at": study_session.next_review_at,
        }
    if args.command == "miss":
        rescheduled = await service.handle_missed_session(args.session_id)
        return {"id": rescheduled.id, "scheduled_at": rescheduled.scheduled_at}
    if args.command == "study-times":
        return [asdict(hour) for hour in await service.get_optimal_study_times(args.user_id)]
    if args.command == "quiz":
        entry = await service.record_quiz_result(
            args.user_id,
            args.subject,
            args.topic,
            args.accuracy,
            time_spent_seconds=args.time_spent,
        )
        return {
            "subject": entry.subject,
            "topic": entry.topic,
            "day": entry.day,
            "quizzes_taken": entry.quizzes_taken,
            "quiz_accuracy": entry.quiz_accuracy,
        }
    if args.command == "create-session":
        study_session = await service.create_session(
            args.user_id,
            args.subject,
            args.topic,
            args.at,
            args.minutes,
            session_type=args.type,
            material_id=args.material_id,
        )
        return {
            "id": study_session.id,
            "status": study_session.status,
            "scheduled_at": study_session.scheduled_at,
        }
    if args.command == "delete-session":
        await service.delete_session(args.session_id)
        return {"id": args.session_id, "deleted": True}
    if args.command == "gaps":
        return [asdict(topic) for topic in await service.get_knowledge_gaps(args.user_id)]
    if args.command == "velocity":
        days = args.days if args.days is not None else VELOCITY_WINDOW_DAYS
        velocity = await service.get_learning_velocity(args.user_id, args.subject, days)
        return {"subject": args.subject, "days": days, "velocity": velocity}
    raise ValueError(f"Unknown command: {args.command}")


def run_command(settings: AppSettings, args: argparse.Namespace) -> str:
    """Run a planner command using the provided settings and return its JSON output."""
    _configure_logging(settings.log_level)
    LOGGER.debug("%s running in %s mode.", settings.app_name, settings.app_env)

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    service = SchedulerService(
        get_session_factory(),
        default_daily_minutes=settings.default_daily_study_minutes,
    )
    result = asyncio.run(execute(service, settings, args))
    return json.dumps(result, default=str, indent=2)
