"""
Exercise variant dataclasses.

Generator output uses camelCase keys (correctAnswer, audioText); snake_case
keys are accepted as well.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from src.evaluation.models import AnswerRecord, ExerciseType

from . import register


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def _require(data: dict[str, Any], *keys: str) -> str:
    value = _first(data, *keys)
    if value is None:
        raise ValueError(f"{data.get('type', 'exercise')} is missing '{keys[0]}'")
    return str(value)


@register(ExerciseType.MULTIPLE_CHOICE)
@dataclass
class MultipleChoiceExercise:
    """Pick the correct option."""

    kind: ClassVar[ExerciseType] = ExerciseType.MULTIPLE_CHOICE

    question: str
    options: list[str]
    correct_answer: str
    explanation: str | None = None
    exercise_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MultipleChoiceExercise:
        options = [str(o) for o in data.get("options") or []]
        if not options:
            raise ValueError("multiple-choice is missing 'options'")
        return cls(
            question=_require(data, "question"),
            options=options,
            correct_answer=_require(data, "correctAnswer", "correct_answer"),
            explanation=data.get("explanation"),
            exercise_id=data.get("id"),
        )

    def answer_record(self, user_answer: str, lesson_kind: str | None = None) -> AnswerRecord:
        return AnswerRecord(user_answer, self.correct_answer, self.kind, lesson_kind, self.question)


@register(ExerciseType.TRANSLATE_TYPING)
@dataclass
class TranslateTypingExercise:
    """Type the English translation of a sentence."""

    kind: ClassVar[ExerciseType] = ExerciseType.TRANSLATE_TYPING

    question: str
    correct_answer: str
    hint: str | None = None
    explanation: str | None = None
    exercise_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranslateTypingExercise:
        return cls(
            question=_require(data, "question"),
            correct_answer=_require(data, "correctAnswer", "correct_answer"),
            hint=data.get("hint"),
            explanation=data.get("explanation"),
            exercise_id=data.get("id"),
        )

    def answer_record(self, user_answer: str, lesson_kind: str | None = None) -> AnswerRecord:
        return AnswerRecord(user_answer, self.correct_answer, self.kind, lesson_kind, self.question)


@register(ExerciseType.WORD_BUBBLES)
@dataclass
class WordBubblesExercise:
    """Assemble the sentence from shuffled word bubbles."""

    kind: ClassVar[ExerciseType] = ExerciseType.WORD_BUBBLES

    correct_answer: str
    words: list[str]
    question: str | None = None
    explanation: str | None = None
    exercise_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordBubblesExercise:
        correct = _require(data, "correctAnswer", "correct_answer")
        words = [str(w) for w in data.get("words") or []] or correct.split()
        return cls(
            correct_answer=correct,
            words=words,
            question=data.get("question"),
            explanation=data.get("explanation"),
            exercise_id=data.get("id"),
        )

    def answer_record(self, user_answer: str, lesson_kind: str | None = None) -> AnswerRecord:
        return AnswerRecord(user_answer, self.correct_answer, self.kind, lesson_kind, self.question)


@dataclass(frozen=True)
class MatchingPair:
    english: str
    czech: str


@register(ExerciseType.MATCHING_PAIRS)
@dataclass
class MatchingPairsExercise:
    """Match English words with their Czech meanings."""

    kind: ClassVar[ExerciseType] = ExerciseType.MATCHING_PAIRS

    pairs: list[MatchingPair] = field(default_factory=list)
    exercise_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchingPairsExercise:
        pairs = []
        for raw in data.get("pairs") or []:
            english = _first(raw, "english")
            czech = _first(raw, "czech")
            if english is None or czech is None:
                raise ValueError("matching-pairs entry needs 'english' and 'czech'")
            pairs.append(MatchingPair(str(english), str(czech)))
        if not pairs:
            raise ValueError("matching-pairs is missing 'pairs'")
        return cls(pairs=pairs, exercise_id=data.get("id"))

    @property
    def words(self) -> list[str]:
        return [pair.english for pair in self.pairs]

    def check_pair(self, english: str, czech: str) -> bool:
        """Check one matched pair (case and surrounding whitespace ignored)."""
        key = (english.strip().lower(), czech.strip().lower())
        return any(
            (pair.english.strip().lower(), pair.czech.strip().lower()) == key
            for pair in self.pairs
        )


@register(ExerciseType.LISTENING)
@dataclass
class ListeningExercise:
    """Type (or pick) what was heard."""

    kind: ClassVar[ExerciseType] = ExerciseType.LISTENING

    audio_text: str
    correct_answer: str
    options: list[str] = field(default_factory=list)
    exercise_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListeningExercise:
        audio_text = _require(data, "audioText", "audio_text")
        return cls(
            audio_text=audio_text,
            correct_answer=str(_first(data, "correctAnswer", "correct_answer") or audio_text),
            options=[str(o) for o in data.get("options") or []],
            exercise_id=data.get("id"),
        )

    def answer_record(self, user_answer: str, lesson_kind: str | None = None) -> AnswerRecord:
        # The audio text is not shown, so it is not passed as context
        return AnswerRecord(user_answer, self.correct_answer, self.kind, lesson_kind)


Exercise = Union[
    MultipleChoiceExercise,
    TranslateTypingExercise,
    WordBubblesExercise,
    MatchingPairsExercise,
    ListeningExercise,
]
