"""Application bootstrap helpers for the Study Planner project."""

from .runtime import run_command
from .settings import AppSettings

__all__ = ["run_command", "AppSettings"]
