"""
Learner progress: XP, levels and daily streaks.

Pure functions over a UserProgress value; persistence is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

XP_PER_CORRECT = 10
PERFECT_SESSION_BONUS = 5
XP_PER_LEVEL = 100


@dataclass(frozen=True)
class UserProgress:
    """Aggregate progress of one learner."""

    total_xp: int = 0
    level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    last_practice_date: date | None = None
    total_exercises_completed: int = 0
    total_correct_answers: int = 0


def calculate_session_xp(score: int, total: int) -> int:
    """10 XP per correct answer, plus a bonus for a perfect session."""
    xp = score * XP_PER_CORRECT
    if total > 0 and score == total:
        xp += PERFECT_SESSION_BONUS
    return xp


def level_for_xp(total_xp: int) -> int:
    """Level up every 100 XP, starting at level 1."""
    return max(0, total_xp) // XP_PER_LEVEL + 1


def update_streak(progress: UserProgress, today: date) -> UserProgress:
    """
    Record a practice day.

    Args:
        progress: Current progress
        today: Calendar day of the practice

    Returns:
        Progress with the streak extended, kept or restarted
    """
    last = progress.last_practice_date
    if last is not None and (today - last).days == 0:
        return progress

    if last is not None and (today - last).days == 1:
        streak = progress.current_streak + 1
    else:
        # First practice or the streak was broken
        streak = 1

    return replace(
        progress,
        current_streak=streak,
        longest_streak=max(streak, progress.longest_streak),
        last_practice_date=today,
    )


def add_xp(
    progress: UserProgress,
    xp: int,
    correct_answers: int,
    total_exercises: int,
) -> tuple[UserProgress, bool]:
    """
    Add session XP and exercise counters.

    Returns:
        (new progress, whether the learner leveled up)
    """
    total_xp = progress.total_xp + xp
    level = level_for_xp(total_xp)
    updated = replace(
        progress,
        total_xp=total_xp,
        level=level,
        total_exercises_completed=progress.total_exercises_completed + total_exercises,
        total_correct_answers=progress.total_correct_answers + correct_answers,
    )
    return updated, level > progress.level
