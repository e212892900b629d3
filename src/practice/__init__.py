"""
Practice sessions and learner progress.
"""

from .progress import (
    UserProgress,
    add_xp,
    calculate_session_xp,
    level_for_xp,
    update_streak,
)
from .session import ExerciseOutcome, PracticeSession, SessionResult, SessionSummary

__all__ = [
    "ExerciseOutcome",
    "PracticeSession",
    "SessionResult",
    "SessionSummary",
    "UserProgress",
    "add_xp",
    "calculate_session_xp",
    "level_for_xp",
    "update_streak",
]
