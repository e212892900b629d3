"""
Word mastery: SM-2 scheduling and practice selection.

Components:
- WordMasteryRecord: per-word memory state
- MasteryScheduler: SM-2 update after each evaluated answer
- select_words_for_practice: review > problem > new > normal ranking
- calculate_difficulty_profile: generation hints from mastery
- MasteryRepository: storage port (InMemoryMasteryRepository included)
"""

from .difficulty import (
    DifficultyLevel,
    DifficultyProfile,
    adjust_exercise_count,
    calculate_difficulty_profile,
    difficulty_hints,
)
from .models import MasteryLevel, WordMasteryRecord, word_key
from .repository import InMemoryMasteryRepository, MasteryRepository, MasteryStoreError
from .scheduler import MasteryScheduler, SM2Config, mastery_level_for
from .selection import (
    PracticePriority,
    WordSelection,
    get_problem_words,
    get_words_for_review,
    is_due_for_review,
    select_words_for_practice,
)

__all__ = [
    # Records
    "MasteryLevel",
    "WordMasteryRecord",
    "word_key",
    # Scheduling
    "MasteryScheduler",
    "SM2Config",
    "mastery_level_for",
    # Selection
    "PracticePriority",
    "WordSelection",
    "get_problem_words",
    "get_words_for_review",
    "is_due_for_review",
    "select_words_for_practice",
    # Difficulty
    "DifficultyLevel",
    "DifficultyProfile",
    "adjust_exercise_count",
    "calculate_difficulty_profile",
    "difficulty_hints",
    # Storage
    "InMemoryMasteryRepository",
    "MasteryRepository",
    "MasteryStoreError",
]
