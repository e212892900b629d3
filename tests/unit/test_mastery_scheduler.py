"""
Unit tests for the SM-2 mastery scheduler.
"""

from datetime import timedelta

import pytest

from src.mastery import (
    MasteryLevel,
    MasteryScheduler,
    SM2Config,
    WordMasteryRecord,
    mastery_level_for,
)


@pytest.fixture
def scheduler():
    return MasteryScheduler(SM2Config())


class TestCorrectAnswers:
    """Interval growth on consecutive correct answers."""

    def test_fresh_word_first_answer(self, scheduler, now):
        record = scheduler.update(None, True, now=now, word="Apple")

        assert record.word == "apple"
        assert record.repetition_count == 1
        assert record.interval_days == 1
        assert record.ease_factor == pytest.approx(2.6)
        assert record.correct_count == 1
        assert record.next_review_at == now + timedelta(days=1)
        assert record.last_reviewed_at == now
        assert record.mastery_level == MasteryLevel.LEARNING

    def test_three_correct_answers(self, scheduler, now):
        record = None
        intervals = []
        repetitions = []
        for _ in range(3):
            record = scheduler.update(record, True, now=now, word="apple")
            intervals.append(record.interval_days)
            repetitions.append(record.repetition_count)

        # Third interval uses the ease from before the update: round(6 * 2.7)
        assert intervals == [1, 6, 16]
        assert repetitions == [1, 2, 3]
        assert record.ease_factor == pytest.approx(2.8)
        assert record.mastery_level == MasteryLevel.REVIEWING

    def test_mastered_needs_repetitions_and_interval(self, scheduler, now):
        record = None
        levels = []
        for _ in range(5):
            record = scheduler.update(record, True, now=now, word="apple")
            levels.append(record.mastery_level)

        assert record.repetition_count == 5
        assert record.interval_days >= 21
        assert levels[-1] == MasteryLevel.MASTERED
        assert MasteryLevel.MASTERED not in levels[:-1]

    def test_input_not_mutated(self, scheduler, now):
        original = scheduler.new_record("apple")
        scheduler.update(original, True, now=now)

        assert original.repetition_count == 0
        assert original.correct_count == 0
        assert original.next_review_at is None


class TestIncorrectAnswers:
    """Resets and ease penalties."""

    def test_miss_resets(self, scheduler, now):
        record = WordMasteryRecord(
            word="apple",
            ease_factor=2.7,
            interval_days=16,
            repetition_count=3,
            correct_count=3,
            mastery_level=MasteryLevel.REVIEWING,
        )

        updated = scheduler.update(record, False, now=now)

        assert updated.repetition_count == 0
        assert updated.interval_days == 1
        assert updated.ease_factor == pytest.approx(2.5)
        assert updated.incorrect_count == 1
        assert updated.correct_count == 3
        assert updated.mastery_level == MasteryLevel.NEW
        assert updated.next_review_at == now + timedelta(days=1)

    def test_ease_floor(self, scheduler, now):
        record = None
        for _ in range(20):
            record = scheduler.update(record, False, now=now, word="apple")
            assert record.ease_factor >= 1.3

        assert record.ease_factor == pytest.approx(1.3)
        assert record.incorrect_count == 20

    def test_recovery_after_floor(self, scheduler, now):
        record = WordMasteryRecord(word="apple", ease_factor=1.3)

        updated = scheduler.update(record, True, now=now)

        assert updated.ease_factor == pytest.approx(1.4)


class TestMasteryLevel:
    """Tier derivation."""

    @pytest.mark.parametrize(
        "repetitions,interval,expected",
        [
            (0, 1, MasteryLevel.NEW),
            (1, 1, MasteryLevel.LEARNING),
            (2, 6, MasteryLevel.REVIEWING),
            (4, 50, MasteryLevel.REVIEWING),
            (5, 20, MasteryLevel.REVIEWING),
            (5, 21, MasteryLevel.MASTERED),
        ],
    )
    def test_tiers(self, repetitions, interval, expected):
        assert mastery_level_for(repetitions, interval) == expected


class TestRecordSerialization:
    """Storage payloads."""

    def test_round_trip(self, scheduler, now):
        record = scheduler.update(None, True, now=now, word="apple")

        restored = WordMasteryRecord.from_dict(record.to_dict())

        assert restored == record

    def test_from_dict_naive_timestamp_is_utc(self, now):
        record = WordMasteryRecord.from_dict({
            "word": "Apple",
            "next_review_at": "2024-03-01T12:00:00",
            "mastery_level": "learning",
        })

        assert record.word == "apple"
        assert record.next_review_at == now
        assert record.mastery_level == MasteryLevel.LEARNING

    def test_correct_rate(self):
        assert WordMasteryRecord(word="apple").correct_rate == 0.0
        assert WordMasteryRecord(word="apple", correct_count=3, incorrect_count=1).correct_rate == 0.75
