"""
Local fast-path answer evaluation.

Cheap heuristics that run before any remote call, in order:
1. Exact match after normalization
2. British/American spelling variants
3. Same words in a different order (skipped for idiom lessons)
4. Short answers (1-2 words) with a small typo
5. Levenshtein similarity tiers

A high-confidence positive is final. Anything else is the provisional
result handed to the remote judge, and the fallback if the judge is
unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from config import get_settings

from .models import Confidence, Verdict
from .normalization import americanize, normalize_answer, tokenize
from .similarity import similarity

IDIOM_LESSON_KIND = "idioms"

REASON_WORD_ORDER = "word order differs"
REASON_SHORT_ANSWER = "close match with minor differences"
REASON_ALMOST_CORRECT = "almost correct"
REASON_MINOR_MISTAKES = "correct with minor mistakes"
REASON_EMPTY = "empty answer"


@dataclass(frozen=True)
class LocalThresholds:
    """Similarity thresholds for the local fast path."""

    high: float = 0.92
    medium: float = 0.85
    short_answer: float = 0.85
    short_answer_max_tokens: int = 2

    @classmethod
    def from_settings(cls) -> LocalThresholds:
        return cls(**get_settings().get_evaluation_config())


def is_idiom_lesson(lesson_kind: str | None) -> bool:
    """Idiom lessons require the exact fixed phrase."""
    return (lesson_kind or "").strip().lower() == IDIOM_LESSON_KIND


def evaluate_locally(
    user_answer: str | None,
    correct_answer: str | None,
    lesson_kind: str | None = None,
    thresholds: LocalThresholds | None = None,
) -> Verdict:
    """
    Evaluate an answer with local heuristics only.

    Args:
        user_answer: What the learner typed (None treated as empty)
        correct_answer: The expected answer (None treated as empty)
        lesson_kind: Lesson category; "idioms" disables word-order tolerance
        thresholds: Similarity thresholds (defaults if None)

    Returns:
        Verdict; never raises
    """
    thresholds = thresholds or LocalThresholds()
    user = normalize_answer(user_answer)
    correct = normalize_answer(correct_answer)

    if not user or not correct:
        return Verdict(False, Confidence.LOW, REASON_EMPTY)

    if user == correct:
        return Verdict(True, Confidence.HIGH)

    if americanize(user) == americanize(correct):
        return Verdict(True, Confidence.HIGH)

    user_tokens = tokenize(user)
    correct_tokens = tokenize(correct)

    if not is_idiom_lesson(lesson_kind) and sorted(user_tokens) == sorted(correct_tokens):
        return Verdict(True, Confidence.HIGH, REASON_WORD_ORDER)

    score = similarity(user, correct)

    is_short = (
        len(user_tokens) <= thresholds.short_answer_max_tokens
        and len(correct_tokens) <= thresholds.short_answer_max_tokens
    )
    if is_short and thresholds.short_answer <= score < thresholds.high:
        logger.debug(f"Short answer accepted at similarity {score:.2f}")
        return Verdict(True, Confidence.MEDIUM, REASON_SHORT_ANSWER)

    if score >= thresholds.high:
        return Verdict(True, Confidence.HIGH, REASON_ALMOST_CORRECT)

    if score >= thresholds.medium:
        return Verdict(True, Confidence.MEDIUM, REASON_MINOR_MISTAKES)

    return Verdict(False, Confidence.LOW)
