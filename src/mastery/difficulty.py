"""
Adaptive difficulty profile.

Summarizes a learner's word mastery into hints for exercise generation:
overall level, complexity (1-3) and whether to lean on problem or review
words.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .models import MasteryLevel, WordMasteryRecord


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


COMPLEXITY_BY_LEVEL = {
    DifficultyLevel.BEGINNER: 1,
    DifficultyLevel.INTERMEDIATE: 2,
    DifficultyLevel.ADVANCED: 3,
}


@dataclass(frozen=True)
class DifficultyProfile:
    level: DifficultyLevel
    focus_on_problem_words: bool
    include_review_words: bool
    exercise_complexity: int  # 1-3


BEGINNER_PROFILE = DifficultyProfile(
    level=DifficultyLevel.BEGINNER,
    focus_on_problem_words=False,
    include_review_words=False,
    exercise_complexity=1,
)


def calculate_difficulty_profile(
    records: Iterable[WordMasteryRecord],
    user_level: int,
) -> DifficultyProfile:
    """
    Derive a difficulty profile from all of a learner's mastery records.

    Thresholds:
    - advanced: level >= 10, mastered ratio > 0.5, avg correct rate > 0.8
    - intermediate: level >= 5, mastered ratio > 0.2, avg correct rate > 0.6
    - otherwise beginner
    """
    records = list(records)
    if not records:
        return BEGINNER_PROFILE

    total = len(records)
    avg_correct_rate = sum(r.correct_rate for r in records) / total

    distribution = Counter(r.mastery_level for r in records)
    mastered_ratio = distribution[MasteryLevel.MASTERED] / total
    problem_ratio = (
        distribution[MasteryLevel.NEW] + distribution[MasteryLevel.LEARNING]
    ) / total

    if user_level >= 10 and mastered_ratio > 0.5 and avg_correct_rate > 0.8:
        level = DifficultyLevel.ADVANCED
    elif user_level >= 5 and mastered_ratio > 0.2 and avg_correct_rate > 0.6:
        level = DifficultyLevel.INTERMEDIATE
    else:
        level = DifficultyLevel.BEGINNER

    return DifficultyProfile(
        level=level,
        focus_on_problem_words=problem_ratio > 0.3,
        include_review_words=distribution[MasteryLevel.REVIEWING] > 0,
        exercise_complexity=COMPLEXITY_BY_LEVEL[level],
    )


def difficulty_hints(profile: DifficultyProfile) -> list[str]:
    """Generation hints derived from a profile."""
    hints = {
        DifficultyLevel.BEGINNER: "DIFFICULTY: Easy - simpler vocabulary and shorter sentences",
        DifficultyLevel.INTERMEDIATE: "DIFFICULTY: Medium - include some phrasal verbs and idioms",
        DifficultyLevel.ADVANCED: "DIFFICULTY: Hard - complex sentences, idioms, slang",
    }
    result = [hints[profile.level]]

    if profile.focus_on_problem_words:
        result.append("FOCUS: Repeat problem words more frequently")

    if profile.exercise_complexity >= 2:
        result.append("COMPLEXITY: Include fill-in-the-blank and context clues")

    return result


def adjust_exercise_count(
    base_count: int,
    profile: DifficultyProfile,
    review_words_count: int,
    max_count: int = 10,
) -> int:
    """More exercises for long review queues and advanced learners, capped."""
    count = base_count
    if review_words_count > 3:
        count += 2
    if profile.level == DifficultyLevel.ADVANCED:
        count += 1
    return min(count, max_count)
