"""
Exercise variants for practice sessions.

Each exercise kind (multiple choice, translate typing, etc.) is its own
dataclass carrying only the fields that kind uses. Generator output arrives
as loose dicts; parse_exercise() turns one into the right variant.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from src.evaluation.models import ExerciseType

T = TypeVar("T")

# Variant registry - populated by @register decorator
EXERCISE_KINDS: dict[ExerciseType, type] = {}


def register(exercise_type: ExerciseType) -> Callable[[type[T]], type[T]]:
    """Decorator to register an exercise variant."""
    def decorator(cls: type[T]) -> type[T]:
        EXERCISE_KINDS[exercise_type] = cls
        return cls
    return decorator


def get_exercise_class(exercise_type: str | ExerciseType) -> type | None:
    """Get the variant class for an exercise type."""
    if isinstance(exercise_type, str):
        try:
            exercise_type = ExerciseType(exercise_type.lower())
        except ValueError:
            return None
    return EXERCISE_KINDS.get(exercise_type)


def parse_exercise(data: dict[str, Any]) -> Any:
    """
    Build an exercise variant from a generator dict.

    Raises:
        ValueError: Unknown exercise type or missing required fields
    """
    exercise_cls = get_exercise_class(data.get("type", ""))
    if exercise_cls is None:
        raise ValueError(f"Unknown exercise type: {data.get('type')!r}")
    return exercise_cls.from_dict(data)


# Import variants to trigger registration
from .kinds import (  # noqa: E402
    Exercise,
    ListeningExercise,
    MatchingPair,
    MatchingPairsExercise,
    MultipleChoiceExercise,
    TranslateTypingExercise,
    WordBubblesExercise,
)

__all__ = [
    "EXERCISE_KINDS",
    "Exercise",
    "ListeningExercise",
    "MatchingPair",
    "MatchingPairsExercise",
    "MultipleChoiceExercise",
    "TranslateTypingExercise",
    "WordBubblesExercise",
    "get_exercise_class",
    "parse_exercise",
    "register",
]
