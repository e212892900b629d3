"""
Unit tests for the AnswerEvaluator facade (local fast path + judge fallback).
"""

import pytest

from config import Settings
from src.evaluation import (
    AnswerEvaluator,
    AnswerRecord,
    Confidence,
    ExerciseType,
    JudgeOutcome,
    Verdict,
)
from src.evaluation.local import REASON_MINOR_MISTAKES


class TestLocalFastPath:
    """Confident local matches never reach the judge."""

    @pytest.mark.asyncio
    async def test_exact_match_skips_judge(self, approving_judge):
        evaluator = AnswerEvaluator(judge=approving_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("I'm fine", "I am fine")

        assert verdict.is_confident_match
        assert approving_judge.calls == 0

    @pytest.mark.asyncio
    async def test_word_order_skips_judge(self, approving_judge):
        evaluator = AnswerEvaluator(judge=approving_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("fine I am", "I am fine", ExerciseType.TRANSLATE_TYPING)

        assert verdict.is_correct is True
        assert verdict.confidence == Confidence.HIGH
        assert approving_judge.calls == 0

    @pytest.mark.asyncio
    async def test_blank_answer_skips_judge(self, approving_judge):
        evaluator = AnswerEvaluator(judge=approving_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("", "I am fine")

        assert verdict.is_correct is False
        assert verdict.confidence == Confidence.LOW
        assert approving_judge.calls == 0

    @pytest.mark.asyncio
    async def test_no_judge_returns_local(self):
        evaluator = AnswerEvaluator(judge=None, timeout_seconds=1)

        verdict = await evaluator.evaluate("the cat sad", "the cat sat")

        assert verdict == Verdict(True, Confidence.MEDIUM, REASON_MINOR_MISTAKES)


class TestJudgeConsulted:
    """Uncertain local results go to the judge."""

    @pytest.mark.asyncio
    async def test_judge_accepts_synonym(self, approving_judge):
        evaluator = AnswerEvaluator(judge=approving_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate(
            "I will phone you",
            "I will call you",
            ExerciseType.TRANSLATE_TYPING,
            context="Zavolám ti",
        )

        assert verdict.is_correct is True
        assert verdict.reason == "stejný význam"
        assert approving_judge.calls == 1

        request = approving_judge.requests[0]
        assert request.exercise_type == "translate-typing"
        assert request.context == "Zavolám ti"
        assert request.is_idiom is False

    @pytest.mark.asyncio
    async def test_judge_overrides_medium_local(self, rejecting_judge):
        evaluator = AnswerEvaluator(judge=rejecting_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("the cat sad", "the cat sat")

        assert verdict.is_correct is False
        assert rejecting_judge.calls == 1

    @pytest.mark.asyncio
    async def test_idiom_flag_passed_to_judge(self, rejecting_judge):
        evaluator = AnswerEvaluator(judge=rejecting_judge, timeout_seconds=1)

        verdict = await evaluator.evaluate(
            "good luck",
            "break a leg",
            lesson_kind="idioms",
        )

        assert verdict.is_correct is False
        assert rejecting_judge.requests[0].is_idiom is True


class TestJudgeFallback:
    """Judge failures fall back to the local verdict."""

    @pytest.mark.asyncio
    async def test_judge_raises(self, make_judge):
        judge = make_judge(raises=RuntimeError("boom"))
        evaluator = AnswerEvaluator(judge=judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("the cat sad", "the cat sat")

        assert verdict == Verdict(True, Confidence.MEDIUM, REASON_MINOR_MISTAKES)
        assert judge.calls == 1

    @pytest.mark.asyncio
    async def test_judge_times_out(self, make_judge, approving_judge):
        judge = make_judge(outcome=approving_judge.outcome, delay=1.0)
        evaluator = AnswerEvaluator(judge=judge, timeout_seconds=0.05)

        verdict = await evaluator.evaluate("the cat sad", "the cat sat")

        assert verdict.confidence == Confidence.MEDIUM
        assert verdict.reason == REASON_MINOR_MISTAKES

    @pytest.mark.asyncio
    async def test_judge_unavailable(self, make_judge):
        judge = make_judge(JudgeOutcome.unavailable("judge API key not configured"))
        evaluator = AnswerEvaluator(judge=judge, timeout_seconds=1)

        verdict = await evaluator.evaluate("we do hone", "we go home")

        assert verdict.is_correct is False
        assert verdict.confidence == Confidence.LOW


class TestJudgeBudget:
    """The outer timeout leaves room for every judge attempt."""

    def test_budget_covers_retries(self):
        settings = Settings(
            judge_timeout_seconds=2.0,
            judge_retry_attempts=3,
            judge_retry_backoff_seconds=0.5,
        )

        # 3 attempts of 2s, plus 0.5s and 1.0s of backoff
        assert settings.get_judge_budget_seconds() == pytest.approx(7.5)

    def test_single_attempt_budget(self):
        settings = Settings(judge_timeout_seconds=8.0, judge_retry_attempts=1)

        assert settings.get_judge_budget_seconds() == pytest.approx(8.0)

    def test_evaluator_default_uses_budget(self, monkeypatch):
        settings = Settings(
            judge_timeout_seconds=2.0,
            judge_retry_attempts=2,
            judge_retry_backoff_seconds=0.5,
        )
        monkeypatch.setattr("src.evaluation.evaluator.get_settings", lambda: settings)

        evaluator = AnswerEvaluator()

        assert evaluator.timeout_seconds == pytest.approx(4.5)

    @pytest.mark.asyncio
    async def test_slow_retrying_judge_within_budget(self, make_judge, rejecting_judge):
        """A judge slower than one attempt but inside the budget is still heard."""
        judge = make_judge(outcome=rejecting_judge.outcome, delay=0.1)
        evaluator = AnswerEvaluator(judge=judge, timeout_seconds=0.5)

        verdict = await evaluator.evaluate("the cat sad", "the cat sat")

        assert verdict.is_correct is False


class TestBatchAndSync:
    """Batch and blocking entry points."""

    @pytest.mark.asyncio
    async def test_batch_preserves_order(self):
        evaluator = AnswerEvaluator(timeout_seconds=1)
        records = [
            AnswerRecord("I'm fine", "I am fine"),
            AnswerRecord("we do hone", "we go home"),
            AnswerRecord("the cat sad", "the cat sat"),
        ]

        verdicts = await evaluator.evaluate_batch(records)

        assert [v.is_correct for v in verdicts] == [True, False, True]
        assert verdicts[2].confidence == Confidence.MEDIUM

    def test_evaluate_sync(self):
        evaluator = AnswerEvaluator(timeout_seconds=1)

        verdict = evaluator.evaluate_sync("my favourite colour", "my favorite color")

        assert verdict.is_confident_match

    def test_verdict_to_dict(self):
        verdict = Verdict(True, Confidence.MEDIUM, "close")
        assert verdict.to_dict() == {"is_correct": True, "confidence": "medium", "reason": "close"}
