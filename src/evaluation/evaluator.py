"""
Answer evaluator facade.

Combines the local fast path with the remote semantic judge:

    normalize -> local heuristics -> (judge) -> Verdict

The judge is only consulted when the local heuristics did not accept the
answer with high confidence. If the judge is missing, times out or fails,
the local verdict is returned instead. evaluate() never raises.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from loguru import logger

from config import get_settings

from .judge import AnswerJudge, HttpAnswerJudge, JudgeOutcome, JudgeRequest
from .local import REASON_EMPTY, LocalThresholds, evaluate_locally
from .models import AnswerRecord, ExerciseType, Verdict


class AnswerEvaluator:
    """
    Decides whether a learner answer is correct enough.

    Usage:
        evaluator = AnswerEvaluator(judge=HttpAnswerJudge())
        verdict = await evaluator.evaluate(
            "I'm fine",
            "I am fine",
            ExerciseType.TRANSLATE_TYPING,
        )
    """

    def __init__(
        self,
        judge: AnswerJudge | None = None,
        thresholds: LocalThresholds | None = None,
        timeout_seconds: float | None = None,
    ):
        """
        Initialize the evaluator.

        Args:
            judge: Remote semantic judge (local-only evaluation if None)
            thresholds: Local similarity thresholds (defaults if None)
            timeout_seconds: Upper bound for one judge call, retries included
        """
        self.judge = judge
        self.thresholds = thresholds or LocalThresholds()
        self.timeout_seconds = timeout_seconds or get_settings().get_judge_budget_seconds()

    async def evaluate(
        self,
        user_answer: str | None,
        correct_answer: str | None,
        exercise_type: ExerciseType | str = ExerciseType.TRANSLATE_TYPING,
        context: str | None = None,
        lesson_kind: str | None = None,
    ) -> Verdict:
        """
        Evaluate a learner answer.

        Args:
            user_answer: What the learner typed (None treated as empty)
            correct_answer: The expected answer (None treated as empty)
            exercise_type: Exercise kind, passed on to the judge
            context: Optional question/prompt shown to the learner
            lesson_kind: Lesson category, e.g. "idioms"

        Returns:
            Verdict with correctness and confidence
        """
        return await self.evaluate_record(
            AnswerRecord(
                user_answer=user_answer or "",
                correct_answer=correct_answer or "",
                exercise_type=exercise_type,
                lesson_kind=lesson_kind,
                context=context,
            )
        )

    async def evaluate_record(self, record: AnswerRecord) -> Verdict:
        """Evaluate a single AnswerRecord."""
        local = evaluate_locally(
            record.user_answer,
            record.correct_answer,
            lesson_kind=record.lesson_kind,
            thresholds=self.thresholds,
        )

        if local.is_confident_match:
            logger.debug(f"Local match for '{record.user_answer}' ({local.reason or 'exact'})")
            return local

        if local.reason == REASON_EMPTY or self.judge is None:
            return local

        outcome = await self._consult_judge(JudgeRequest.from_record(record))
        if outcome.ok:
            return outcome.verdict

        logger.warning(f"Judge unavailable, using local verdict: {outcome.error}")
        return local

    async def evaluate_batch(self, records: Iterable[AnswerRecord]) -> list[Verdict]:
        """Evaluate independent answers concurrently, preserving order."""
        return list(await asyncio.gather(*(self.evaluate_record(r) for r in records)))

    def evaluate_sync(
        self,
        user_answer: str | None,
        correct_answer: str | None,
        exercise_type: ExerciseType | str = ExerciseType.TRANSLATE_TYPING,
        context: str | None = None,
        lesson_kind: str | None = None,
    ) -> Verdict:
        """Blocking wrapper around evaluate() for synchronous callers."""
        return asyncio.run(
            self.evaluate(user_answer, correct_answer, exercise_type, context, lesson_kind)
        )

    async def _consult_judge(self, request: JudgeRequest) -> JudgeOutcome:
        """Call the judge under a timeout; any failure becomes an outcome."""
        try:
            return await asyncio.wait_for(
                self.judge.judge(request),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return JudgeOutcome.unavailable(f"judge timed out after {self.timeout_seconds}s")
        except Exception as e:
            # Third-party judges may raise despite the protocol
            return JudgeOutcome.unavailable(f"judge raised {type(e).__name__}: {e}")


def build_answer_evaluator(local_only: bool = False) -> AnswerEvaluator:
    """Build an evaluator from settings, with the HTTP judge when configured."""
    settings = get_settings()
    judge = None
    if not local_only and settings.has_judge_configured():
        judge = HttpAnswerJudge()
    return AnswerEvaluator(judge=judge, thresholds=LocalThresholds.from_settings())
