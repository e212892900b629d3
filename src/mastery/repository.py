"""
Storage port for word mastery records.

Records are keyed by (learner_id, lowercase word). Writes are upserts and
the last write wins. The storage technology is up to the implementation;
only an in-memory store ships here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import WordMasteryRecord, word_key


class MasteryStoreError(Exception):
    """Raised by repositories when a read or write fails."""


class MasteryRepository(ABC):
    """Abstract repository for word mastery records."""

    @abstractmethod
    def get(self, learner_id: str, word: str) -> WordMasteryRecord | None:
        """
        Get the record for a learner's word.

        Returns:
            The record, or None when the learner never practiced the word
        """

    @abstractmethod
    def upsert(self, learner_id: str, record: WordMasteryRecord) -> None:
        """Insert or replace the record for (learner_id, record.word)."""

    @abstractmethod
    def list_for_learner(self, learner_id: str) -> list[WordMasteryRecord]:
        """All records of a learner."""


class InMemoryMasteryRepository(MasteryRepository):
    """Dict-backed repository, for tests and single-process tools."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], WordMasteryRecord] = {}

    def get(self, learner_id: str, word: str) -> WordMasteryRecord | None:
        return self._records.get((learner_id, word_key(word)))

    def upsert(self, learner_id: str, record: WordMasteryRecord) -> None:
        self._records[(learner_id, word_key(record.word))] = record

    def list_for_learner(self, learner_id: str) -> list[WordMasteryRecord]:
        return [r for (owner, _), r in self._records.items() if owner == learner_id]
