"""Configuration helpers for the Study Planner runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_DAILY_STUDY_MINUTES = 120
DEFAULT_HORIZON_DAYS = 7
MAX_HORIZON_DAYS = 30


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    default_daily_study_minutes: int
    plan_horizon_days: int

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Study Planner")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO")

        try:
            default_daily_study_minutes = int(
                os.getenv("DEFAULT_DAILY_STUDY_MINUTES", str(DEFAULT_DAILY_STUDY_MINUTES))
            )
        except ValueError as exc:  # pragma: no cover - defensive parsing
            raise RuntimeError("DEFAULT_DAILY_STUDY_MINUTES must be an integer.") from exc

        if default_daily_study_minutes < 1:
            raise RuntimeError("DEFAULT_DAILY_STUDY_MINUTES must be a positive integer.")

        try:
            plan_horizon_days = int(os.getenv("PLAN_HORIZON_DAYS", str(DEFAULT_HORIZON_DAYS)))
        except ValueError as exc:  # pragma: no cover - defensive parsing
            raise RuntimeError("PLAN_HORIZON_DAYS must be an integer.") from exc
        if plan_horizon_days < 1 or plan_horizon_days > MAX_HORIZON_DAYS:
            raise RuntimeError(f"PLAN_HORIZON_DAYS must be between 1 and {MAX_HORIZON_DAYS}.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            default_daily_study_minutes=default_daily_study_minutes,
            plan_horizon_days=plan_horizon_days,
        )
