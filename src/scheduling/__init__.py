"""Pure scheduling core: SM-2 reviews, daily planning and streaks."""

from .insights import calculate_velocity, identify_gaps, optimal_study_hours
from .planner import (
    DailyPlan,
    DueReview,
    ExistingSession,
    MaterialRef,
    ReviewItem,
    SessionProposal,
    WeakTopic,
    build_schedule,
    collect_due_reviews,
    plan_day,
)
from .srs import ReviewSchedule, calculate_next_review, is_due, penalize_ease
from .streak import StreakSummary, calculate_streak

__all__ = [
    "DailyPlan",
    "DueReview",
    "ExistingSession",
    "MaterialRef",
    "ReviewItem",
    "ReviewSchedule",
    "SessionProposal",
    "StreakSummary",
    "WeakTopic",
    "build_schedule",
    "calculate_next_review",
    "calculate_streak",
    "calculate_velocity",
    "collect_due_reviews",
    "identify_gaps",
    "is_due",
    "optimal_study_hours",
    "penalize_ease",
    "plan_day",
]
