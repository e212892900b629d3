"""
SM-2 Word Mastery Scheduler.

Binary-outcome variant of the SuperMemo 2 algorithm used for vocabulary:

Correct answer:
- repetitions += 1
- interval: 1 day, then 6 days, then interval * EF (rounded)
- EF += 0.1

Incorrect answer:
- repetitions = 0, interval = 1 day
- EF -= 0.2

EF never drops below 1.3. The mastery tier is derived from repetitions and
interval after every update.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from loguru import logger

from config import get_settings

from .models import MasteryLevel, WordMasteryRecord, as_utc, utc_now


@dataclass
class SM2Config:
    """Configuration for the SM-2 word scheduler."""

    initial_ease: float = 2.5
    minimum_ease: float = 1.3
    first_interval: int = 1  # Days after first correct answer
    second_interval: int = 6  # Days after second correct answer
    ease_bonus: float = 0.1
    ease_penalty: float = 0.2
    mastered_repetitions: int = 5
    mastered_interval_days: int = 21

    @classmethod
    def from_settings(cls) -> SM2Config:
        return cls(**get_settings().get_sm2_config())


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def mastery_level_for(
    repetition_count: int,
    interval_days: int,
    config: SM2Config | None = None,
) -> MasteryLevel:
    """Derive the mastery tier; the first matching rule wins."""
    config = config or SM2Config()
    if (
        repetition_count >= config.mastered_repetitions
        and interval_days >= config.mastered_interval_days
    ):
        return MasteryLevel.MASTERED
    if repetition_count >= 2:
        return MasteryLevel.REVIEWING
    if repetition_count >= 1:
        return MasteryLevel.LEARNING
    return MasteryLevel.NEW


class MasteryScheduler:
    """
    Updates per-word mastery records after an evaluated answer.

    The scheduler is pure: it never mutates the record it is given and
    never touches storage.
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize the scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def new_record(self, word: str, lesson_id: str | None = None) -> WordMasteryRecord:
        """Default record for a word seen for the first time."""
        return WordMasteryRecord(
            word=word,
            ease_factor=self.config.initial_ease,
            interval_days=self.config.first_interval,
            lesson_id=lesson_id,
        )

    def update(
        self,
        record: WordMasteryRecord | None,
        is_correct: bool,
        now: datetime | None = None,
        word: str | None = None,
    ) -> WordMasteryRecord:
        """
        Apply one answer outcome to a word's mastery record.

        Args:
            record: Current record, or None if the word has no history yet
            is_correct: Evaluator verdict for the answer
            now: Review time (current UTC time if None)
            word: Word to create the record for when record is None

        Returns:
            New WordMasteryRecord with updated interval, ease and tier
        """
        now = as_utc(now or utc_now())
        current = record if record is not None else self.new_record(word or "")

        ease = current.ease_factor
        interval = current.interval_days
        repetitions = current.repetition_count

        if is_correct:
            repetitions += 1
            if repetitions == 1:
                interval = self.config.first_interval
            elif repetitions == 2:
                interval = self.config.second_interval
            else:
                interval = _round_half_up(interval * ease)
            ease = max(self.config.minimum_ease, ease + self.config.ease_bonus)
        else:
            # Failed - reset to beginning
            repetitions = 0
            interval = self.config.first_interval
            ease = max(self.config.minimum_ease, ease - self.config.ease_penalty)

        updated = replace(
            current,
            ease_factor=round(ease, 4),
            interval_days=max(1, interval),
            repetition_count=repetitions,
            correct_count=current.correct_count + (1 if is_correct else 0),
            incorrect_count=current.incorrect_count + (0 if is_correct else 1),
            next_review_at=now + timedelta(days=max(1, interval)),
            last_reviewed_at=now,
            mastery_level=mastery_level_for(repetitions, max(1, interval), self.config),
        )

        logger.debug(
            f"Updated mastery for '{updated.word}': correct={is_correct}, "
            f"interval={updated.interval_days}d, ease={updated.ease_factor:.2f}, "
            f"level={updated.mastery_level.value}"
        )

        return updated
