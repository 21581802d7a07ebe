"""Service layer wiring the scheduling core to the database."""

from .scheduler_service import FlashcardReviewResult, SchedulerService

__all__ = ["FlashcardReviewResult", "SchedulerService"]
