"""
Value types shared by the answer evaluation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ExerciseType(str, Enum):
    """Exercise kinds a practice session can produce."""
    MULTIPLE_CHOICE = "multiple-choice"
    TRANSLATE_TYPING = "translate-typing"
    WORD_BUBBLES = "word-bubbles"
    MATCHING_PAIRS = "matching-pairs"
    LISTENING = "listening"


class Confidence(str, Enum):
    """How sure the evaluator is about a verdict."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Verdict:
    """Result of evaluating one learner answer."""
    is_correct: bool
    confidence: Confidence
    reason: str | None = None

    @property
    def is_confident_match(self) -> bool:
        """True when the answer is accepted with high confidence."""
        return self.is_correct and self.confidence == Confidence.HIGH

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_correct": self.is_correct,
            "confidence": self.confidence.value,
            "reason": self.reason,
        }


@dataclass
class AnswerRecord:
    """A single learner submission, consumed once by the evaluator."""
    user_answer: str
    correct_answer: str
    exercise_type: ExerciseType | str = ExerciseType.TRANSLATE_TYPING
    lesson_kind: str | None = None  # e.g. "idioms", "vocabulary"
    context: str | None = None  # question or prompt shown to the learner

    def __post_init__(self) -> None:
        # Learner submissions can legitimately be blank
        self.user_answer = self.user_answer or ""
        self.correct_answer = self.correct_answer or ""

    @property
    def exercise_type_name(self) -> str:
        if isinstance(self.exercise_type, ExerciseType):
            return self.exercise_type.value
        return str(self.exercise_type or "")
