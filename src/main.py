import argparse
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from src.app import AppSettings, run_command
from src.app.settings import MAX_HORIZON_DAYS
from src.db.sessions import SESSION_TYPES

__all__ = ["main", "build_parser"]


def _horizon_days(value: str) -> int:
    try:
        days = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number of days: {value!r}") from exc
    if days < 1 or days > MAX_HORIZON_DAYS:
        raise argparse.ArgumentTypeError(f"days must be between 1 and {MAX_HORIZON_DAYS}")
    return days


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid positive integer: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("value must be at least 1")
    return number


def _timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO timestamp: {value!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan study sessions and spaced-repetition reviews")
    commands = parser.add_subparsers(dest="command", required=True)

    plan = commands.add_parser("plan", help="Generate a study schedule")
    plan.add_argument("--user-id", type=int, required=True)
    plan.add_argument(
        "--days",
        type=_horizon_days,
        default=None,
        help=f"Planning horizon from 1 to {MAX_HORIZON_DAYS} days (default: PLAN_HORIZON_DAYS)",
    )

    streak = commands.add_parser("streak", help="Show current and longest study streaks")
    streak.add_argument("--user-id", type=int, required=True)

    due = commands.add_parser("due", help="List flashcards due for review")
    due.add_argument("--user-id", type=int, required=True)

    review = commands.add_parser("review", help="Grade a flashcard review")
    review.add_argument("--flashcard-id", type=int, required=True)
    review.add_argument("--quality", type=int, required=True, help="Recall quality from 0 to 5")

    quiz = commands.add_parser("quiz", help="Record a graded quiz")
    quiz.add_argument("--user-id", type=int, required=True)
    quiz.add_argument("--subject", required=True)
    quiz.add_argument("--topic", default=None)
    quiz.add_argument("--accuracy", type=float, required=True, help="Score as a percentage")
    quiz.add_argument("--time-spent", type=int, default=0, help="Seconds spent on the quiz")

    create = commands.add_parser("create-session", help="Schedule a study session")
    create.add_argument("--user-id", type=int, required=True)
    create.add_argument("--subject", required=True)
    create.add_argument("--topic", required=True)
    create.add_argument("--at", type=_timestamp, required=True, help="ISO 8601 start time (UTC if no offset)")
    create.add_argument("--minutes", type=_positive_int, required=True)
    create.add_argument("--type", choices=sorted(SESSION_TYPES), default="practice")
    create.add_argument("--material-id", type=int, default=None)

    delete = commands.add_parser("delete-session", help="Delete a study session")
    delete.add_argument("--session-id", type=int, required=True)

    start = commands.add_parser("start", help="Start a scheduled session")
    start.add_argument("--session-id", type=int, required=True)

    complete = commands.add_parser("complete", help="Complete a session")
    complete.add_argument("--session-id", type=int, required=True)
    complete.add_argument("--productivity", type=int, default=None, help="Rating from 1 to 5")
    complete.add_argument("--quality", type=int, default=None, help="Recall quality from 0 to 5")
    complete.add_argument("--notes", default=None)

    miss = commands.add_parser("miss", help="Mark a session as missed and reschedule it")
    miss.add_argument("--session-id", type=int, required=True)

    study_times = commands.add_parser("study-times", help="Show the most productive study hours")
    study_times.add_argument("--user-id", type=int, required=True)

    gaps = commands.add_parser("gaps", help="List weak topics from recent quiz results")
    gaps.add_argument("--user-id", type=int, required=True)

    velocity = commands.add_parser("velocity", help="Show average recent quiz accuracy")
    velocity.add_argument("--user-id", type=int, required=True)
    velocity.add_argument("--subject", default=None)
    velocity.add_argument("--days", type=_positive_int, default=None, help="Window in days (default: 7)")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the application."""
    args = build_parser().parse_args(argv)
    settings = AppSettings.from_env()
    try:
        output = run_command(settings, args)
    except (LookupError, ValueError) as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)
    print(output)


if __name__ == "__main__":
    main()
