"""
Word mastery state.

One WordMasteryRecord exists per (learner, word). It is created on the
first encounter, updated by the scheduler after every evaluated answer and
never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class MasteryLevel(str, Enum):
    """Discrete memorization tier of a word."""
    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"


def word_key(word: str | None) -> str:
    """Storage key for a word: stripped and lower-cased."""
    return (word or "").strip().lower()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


@dataclass
class WordMasteryRecord:
    """SM-2 state for a single word of a single learner."""

    word: str
    ease_factor: float = 2.5  # EF starts at 2.5, never below 1.3
    interval_days: int = 1  # Days until next review
    repetition_count: int = 0  # Consecutive correct answers
    correct_count: int = 0
    incorrect_count: int = 0
    next_review_at: datetime | None = None
    last_reviewed_at: datetime | None = None
    mastery_level: MasteryLevel = MasteryLevel.NEW
    lesson_id: str | None = None

    def __post_init__(self) -> None:
        self.word = word_key(self.word)
        self.mastery_level = MasteryLevel(self.mastery_level)

    @property
    def total_answers(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def correct_rate(self) -> float:
        """Share of correct answers (0.0 when never answered)."""
        if self.total_answers == 0:
            return 0.0
        return self.correct_count / self.total_answers

    def is_due(self, now: datetime | None = None) -> bool:
        """Due once the scheduled review time has passed."""
        if self.next_review_at is None:
            return False
        return as_utc(self.next_review_at) <= as_utc(now or utc_now())

    @property
    def is_problem(self) -> bool:
        """More misses than hits, or not yet past the learning tier."""
        return (
            self.incorrect_count > self.correct_count
            or self.mastery_level in (MasteryLevel.NEW, MasteryLevel.LEARNING)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a storage payload (ISO-8601 timestamps)."""
        return {
            "word": self.word,
            "ease_factor": self.ease_factor,
            "interval_days": self.interval_days,
            "repetition_count": self.repetition_count,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "next_review_at": self.next_review_at.isoformat() if self.next_review_at else None,
            "last_reviewed_at": self.last_reviewed_at.isoformat() if self.last_reviewed_at else None,
            "mastery_level": self.mastery_level.value,
            "lesson_id": self.lesson_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordMasteryRecord:
        """Parse a record from a storage payload."""
        return cls(
            word=data.get("word", ""),
            ease_factor=float(data.get("ease_factor", 2.5)),
            interval_days=int(data.get("interval_days", 1)),
            repetition_count=int(data.get("repetition_count", 0)),
            correct_count=int(data.get("correct_count", 0)),
            incorrect_count=int(data.get("incorrect_count", 0)),
            next_review_at=_parse_timestamp(data.get("next_review_at")),
            last_reviewed_at=_parse_timestamp(data.get("last_reviewed_at")),
            mastery_level=data.get("mastery_level", MasteryLevel.NEW.value),
            lesson_id=data.get("lesson_id"),
        )
