"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.evaluation import Confidence, JudgeOutcome, JudgeRequest, Verdict  # noqa: E402
from src.mastery import MasteryLevel, WordMasteryRecord  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory stores only)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeJudge:
    """Judge double: returns a fixed outcome, raises, or hangs."""

    def __init__(self, outcome=None, raises=None, delay=0.0):
        self.outcome = outcome
        self.raises = raises
        self.delay = delay
        self.requests: list[JudgeRequest] = []

    async def judge(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        return self.outcome

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for scheduling tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_judge():
    """Factory for judge doubles."""
    return FakeJudge


@pytest.fixture
def approving_judge():
    """Judge that accepts every answer."""
    return FakeJudge(
        JudgeOutcome.success(Verdict(True, Confidence.HIGH, "stejný význam"))
    )


@pytest.fixture
def rejecting_judge():
    """Judge that rejects every answer."""
    return FakeJudge(
        JudgeOutcome.success(Verdict(False, Confidence.HIGH, "jiný význam"))
    )


@pytest.fixture
def sample_records(now):
    """A learner's mastery records covering every ranking bucket."""
    return [
        # Due yesterday
        WordMasteryRecord(
            word="apple",
            ease_factor=2.6,
            interval_days=6,
            repetition_count=2,
            correct_count=2,
            next_review_at=now - timedelta(days=1),
            mastery_level=MasteryLevel.REVIEWING,
        ),
        # Struggling, not due yet
        WordMasteryRecord(
            word="banana",
            ease_factor=2.1,
            interval_days=1,
            repetition_count=0,
            correct_count=1,
            incorrect_count=3,
            next_review_at=now + timedelta(days=1),
            mastery_level=MasteryLevel.NEW,
        ),
        # Mastered, due in 30 days
        WordMasteryRecord(
            word="cherry",
            ease_factor=2.9,
            interval_days=30,
            repetition_count=6,
            correct_count=6,
            next_review_at=now + timedelta(days=30),
            mastery_level=MasteryLevel.MASTERED,
        ),
    ]
