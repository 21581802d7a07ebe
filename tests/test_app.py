from collections import deque
from datetime import datetime, timezone
from typing import List, Tuple

import pytest

from src.app.settings import AppSettings
from src.db import run_migrations_if_needed
from src.main import build_parser


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_NAME", "DEFAULT_DAILY_STUDY_MINUTES", "PLAN_HORIZON_DAYS"):
        monkeypatch.delenv(name, raising=False)

    settings = AppSettings.from_env()

    assert settings.app_name == "Study Planner"
    assert settings.default_daily_study_minutes == 120
    assert settings.plan_horizon_days == 7


def test_settings_reject_out_of_range_horizon(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAN_HORIZON_DAYS", "45")

    with pytest.raises(RuntimeError):
        AppSettings.from_env()


def test_settings_reject_non_positive_budget(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_DAILY_STUDY_MINUTES", "0")

    with pytest.raises(RuntimeError):
        AppSettings.from_env()


def test_parser_reads_plan_command() -> None:
    args = build_parser().parse_args(["plan", "--user-id", "3", "--days", "5"])

    assert args.command == "plan"
    assert args.user_id == 3
    assert args.days == 5


@pytest.mark.parametrize("days", ["0", "31", "-2", "week"])
def test_parser_rejects_out_of_range_horizon(days: str) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["plan", "--user-id", "3", "--days", days])


def test_parser_accepts_horizon_bounds() -> None:
    assert build_parser().parse_args(["plan", "--user-id", "3", "--days", "1"]).days == 1
    assert build_parser().parse_args(["plan", "--user-id", "3", "--days", "30"]).days == 30
    assert build_parser().parse_args(["plan", "--user-id", "3"]).days is None


def test_parser_reads_create_session_as_utc() -> None:
    args = build_parser().parse_args(
        [
            "create-session",
            "--user-id",
            "2",
            "--subject",
            "Math",
            "--topic",
            "Algebra",
            "--at",
            "2026-03-11T18:30",
            "--minutes",
            "40",
            "--type",
            "review",
        ]
    )

    assert args.at == datetime(2026, 3, 11, 18, 30, tzinfo=timezone.utc)
    assert (args.minutes, args.type, args.material_id) == (40, "review", None)


@pytest.mark.parametrize(
    "extra",
    [["--at", "tomorrow", "--minutes", "30"], ["--at", "2026-03-11T18:30", "--minutes", "0"]],
)
def test_parser_rejects_invalid_session_arguments(extra: List[str]) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(
            ["create-session", "--user-id", "2", "--subject", "Math", "--topic", "Algebra", *extra]
        )


def test_parser_reads_quiz_command() -> None:
    args = build_parser().parse_args(
        ["quiz", "--user-id", "2", "--subject", "Math", "--accuracy", "72.5", "--time-spent", "300"]
    )

    assert (args.subject, args.topic, args.accuracy, args.time_spent) == ("Math", None, 72.5, 300)


def test_parser_requires_quality_for_review() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["review", "--flashcard-id", "1"])


def test_run_migrations_if_needed_invokes_upgrade(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[Tuple[object, str]] = []

    def fake_upgrade(config: object, target: str) -> None:
        calls.append((config, target))

    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("RUN_MIGRATIONS_ON_STARTUP", "true")
    monkeypatch.setattr("src.db.command.upgrade", fake_upgrade)

    run_migrations_if_needed()

    assert calls and calls[0][1] == "head"


def test_run_migrations_if_needed_skips_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("RUN_MIGRATIONS_ON_STARTUP", "false")

    calls: deque[str] = deque()

    def fake_upgrade(_: object, target: str) -> None:
        calls.append(target)

    monkeypatch.setattr("src.db.command.upgrade", fake_upgrade)

    run_migrations_if_needed()

    assert not calls
