"""
Word selection for practice sets.

Ranks a lesson's words against the learner's mastery records:

    review (100) > problem (90) > new (80) > normal (0-50)

- review: a record exists and its review time has passed
- problem: learning tier, or more misses than hits
- new: no record yet
- normal: everything else, words coming due sooner rank higher
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .models import MasteryLevel, WordMasteryRecord, as_utc, utc_now, word_key

REVIEW_SCORE = 100
PROBLEM_SCORE = 90
NEW_SCORE = 80
NORMAL_BASE_SCORE = 50
NORMAL_DECAY_PER_DAY = 5


class PracticePriority(str, Enum):
    """Why a word was picked for practice."""
    REVIEW = "review"
    PROBLEM = "problem"
    NEW = "new"
    NORMAL = "normal"


@dataclass(frozen=True)
class WordSelection:
    word: str
    priority: PracticePriority
    score: int


def index_records(records: Iterable[WordMasteryRecord]) -> dict[str, WordMasteryRecord]:
    """Map word key -> record."""
    return {word_key(r.word): r for r in records}


def is_due_for_review(record: WordMasteryRecord | None, now: datetime | None = None) -> bool:
    """A word is due iff it has a record whose review time has passed."""
    return record is not None and record.is_due(now)


def get_words_for_review(
    records: Iterable[WordMasteryRecord],
    now: datetime | None = None,
) -> list[WordMasteryRecord]:
    """Records due for spaced-repetition review."""
    now = now or utc_now()
    return [r for r in records if r.is_due(now)]


def get_problem_words(records: Iterable[WordMasteryRecord]) -> list[WordMasteryRecord]:
    """Problem words, most-missed first."""
    problems = [r for r in records if r.is_problem]
    return sorted(problems, key=lambda r: r.incorrect_count, reverse=True)


def _normal_score(record: WordMasteryRecord, now: datetime) -> int:
    if record.next_review_at is None:
        return NORMAL_BASE_SCORE
    days_until_due = max(0, (as_utc(record.next_review_at) - as_utc(now)).days)
    return max(0, NORMAL_BASE_SCORE - days_until_due * NORMAL_DECAY_PER_DAY)


def prioritize_word(
    word: str,
    record: WordMasteryRecord | None,
    now: datetime,
) -> WordSelection:
    """Assign a practice priority and score to a single word."""
    if record is None:
        return WordSelection(word, PracticePriority.NEW, NEW_SCORE)
    if record.is_due(now):
        return WordSelection(word, PracticePriority.REVIEW, REVIEW_SCORE)
    if (
        record.mastery_level == MasteryLevel.LEARNING
        or record.incorrect_count > record.correct_count
    ):
        return WordSelection(word, PracticePriority.PROBLEM, PROBLEM_SCORE)
    return WordSelection(word, PracticePriority.NORMAL, _normal_score(record, now))


def select_words_for_practice(
    lesson_words: Iterable[str],
    records: Iterable[WordMasteryRecord],
    count: int = 6,
    now: datetime | None = None,
) -> list[WordSelection]:
    """
    Pick the top words of a lesson for the next practice set.

    Args:
        lesson_words: Words of the lesson, in lesson order
        records: The learner's mastery records (any words)
        count: Number of words to return
        now: Reference time (current UTC time if None)

    Returns:
        Up to `count` selections, highest score first; ties keep lesson order
    """
    now = now or utc_now()
    by_word = index_records(records)

    seen: set[str] = set()
    selections: list[WordSelection] = []
    for word in lesson_words:
        key = word_key(word)
        if not key or key in seen:
            continue
        seen.add(key)
        selections.append(prioritize_word(word, by_word.get(key), now))

    selections.sort(key=lambda s: s.score, reverse=True)
    return selections[: max(0, count)]
