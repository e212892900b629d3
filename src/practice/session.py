"""
Practice Session: one learner working through one lesson.

Flow per exercise:
    AnswerRecord -> AnswerEvaluator -> Verdict -> MasteryScheduler -> repository

The scheduler update for a word only runs once its verdict is known. Storage
failures are logged and reported on the outcome; they never stop the session.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from loguru import logger

from config import get_settings
from src.evaluation import AnswerEvaluator, AnswerRecord, Verdict
from src.mastery import (
    MasteryRepository,
    MasteryScheduler,
    MasteryStoreError,
    WordMasteryRecord,
    WordSelection,
    select_words_for_practice,
)

from .progress import UserProgress, add_xp, calculate_session_xp, update_streak


@dataclass(frozen=True)
class ExerciseOutcome:
    """Result of one submitted answer."""
    word: str
    verdict: Verdict
    mastery: WordMasteryRecord
    persisted: bool = True


@dataclass(frozen=True)
class SessionSummary:
    score: int
    total: int
    accuracy: float  # 0.0-1.0
    exercise_types: list[str] = field(default_factory=list)
    xp_earned: int = 0
    duration_seconds: int = 0


@dataclass(frozen=True)
class SessionResult:
    summary: SessionSummary
    progress: UserProgress
    leveled_up: bool


class PracticeSession:
    """
    Orchestrates evaluation, scheduling and persistence for a lesson.

    Usage:
        session = PracticeSession("learner-1", "lesson-3", evaluator, scheduler, repo)
        words = session.plan(lesson_words)
        outcome = await session.submit("apple", exercise.answer_record("jablko"))
        result = session.finish(progress, date.today())
    """

    def __init__(
        self,
        learner_id: str,
        lesson_id: str | None,
        evaluator: AnswerEvaluator,
        scheduler: MasteryScheduler,
        repository: MasteryRepository,
        lesson_kind: str | None = None,
    ):
        self.learner_id = learner_id
        self.lesson_id = lesson_id
        self.evaluator = evaluator
        self.scheduler = scheduler
        self.repository = repository
        self.lesson_kind = lesson_kind
        self.start_time = time.monotonic()

        self.outcomes: list[ExerciseOutcome] = []
        self._exercise_types: list[str] = []

    # =========================================================================
    # Planning
    # =========================================================================

    def plan(
        self,
        lesson_words: Iterable[str],
        count: int | None = None,
        now: datetime | None = None,
    ) -> list[WordSelection]:
        """Pick the lesson words to practice, most urgent first."""
        if count is None:
            count = get_settings().practice_words_per_session

        try:
            records = self.repository.list_for_learner(self.learner_id)
        except MasteryStoreError as e:
            logger.error(f"Could not load mastery for {self.learner_id}: {e}")
            records = []

        return select_words_for_practice(lesson_words, records, count=count, now=now)

    # =========================================================================
    # Answering
    # =========================================================================

    async def submit(
        self,
        word: str,
        record: AnswerRecord,
        now: datetime | None = None,
    ) -> ExerciseOutcome:
        """
        Evaluate one answer and update the word's mastery.

        Args:
            word: Lesson word the exercise practices
            record: The learner's answer
            now: Review time (current UTC time if None)

        Returns:
            ExerciseOutcome; persisted=False when the store failed
        """
        if record.lesson_kind is None:
            record = replace(record, lesson_kind=self.lesson_kind)

        verdict = await self.evaluator.evaluate_record(record)

        persisted = True
        try:
            current = self.repository.get(self.learner_id, word)
        except MasteryStoreError as e:
            logger.error(f"Could not read mastery for '{word}': {e}")
            current = None
            persisted = False

        if current is None:
            current = self.scheduler.new_record(word, lesson_id=self.lesson_id)
        mastery = self.scheduler.update(current, verdict.is_correct, now=now)

        # Skip the write when the read failed so history is not overwritten
        if persisted:
            try:
                self.repository.upsert(self.learner_id, mastery)
            except MasteryStoreError as e:
                logger.error(f"Could not save mastery for '{word}': {e}")
                persisted = False

        outcome = ExerciseOutcome(word=word, verdict=verdict, mastery=mastery, persisted=persisted)
        self.outcomes.append(outcome)

        type_name = record.exercise_type_name
        if type_name and type_name not in self._exercise_types:
            self._exercise_types.append(type_name)

        return outcome

    # =========================================================================
    # Completion
    # =========================================================================

    def summary(self) -> SessionSummary:
        """Score and XP of the answers submitted so far."""
        total = len(self.outcomes)
        score = sum(1 for o in self.outcomes if o.verdict.is_correct)
        return SessionSummary(
            score=score,
            total=total,
            accuracy=score / total if total else 0.0,
            exercise_types=list(self._exercise_types),
            xp_earned=calculate_session_xp(score, total),
            duration_seconds=int(time.monotonic() - self.start_time),
        )

    def finish(self, progress: UserProgress, today: date) -> SessionResult:
        """Apply the session to the learner's streak and XP."""
        summary = self.summary()
        progress = update_streak(progress, today)
        progress, leveled_up = add_xp(progress, summary.xp_earned, summary.score, summary.total)

        logger.info(
            f"Session finished for {self.learner_id}: {summary.score}/{summary.total}, "
            f"+{summary.xp_earned} XP, level {progress.level}"
            + (" (level up)" if leveled_up else "")
        )

        return SessionResult(summary=summary, progress=progress, leveled_up=leveled_up)
