"""
Configuration settings for the Kuba English practice core.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Answer Judge (OpenAI-compatible chat completions)
    # ========================================
    judge_api_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL of the chat-completions service used as semantic judge",
    )
    judge_api_key: str | None = Field(
        default=None,
        description="Bearer key for the judge service (judge is skipped when unset)",
    )
    judge_model: str = Field(
        default="google/gemini-3-flash-preview",
        description="Model name sent to the judge service",
    )
    judge_temperature: float = Field(
        default=0.1,
        description="Sampling temperature (low for consistent grading)",
    )
    judge_timeout_seconds: float = Field(
        default=8.0,
        description="Hard timeout for a single judge call",
    )
    judge_retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per judge call (timeouts, request errors and 5xx are retried)",
    )
    judge_retry_backoff_seconds: float = Field(
        default=0.5,
        description="Base delay for exponential backoff between judge attempts",
    )
    judge_reason_language: str = Field(
        default="Czech",
        description="Language the judge writes its short reason in",
    )

    # ========================================
    # Local Evaluation Thresholds
    # ========================================
    similarity_high_threshold: float = Field(
        default=0.92,
        description="Levenshtein similarity accepted with high confidence",
    )
    similarity_medium_threshold: float = Field(
        default=0.85,
        description="Levenshtein similarity accepted with medium confidence",
    )
    short_answer_threshold: float = Field(
        default=0.85,
        description="Similarity bar for answers of at most short_answer_max_tokens words",
    )
    short_answer_max_tokens: int = Field(
        default=2,
        description="Token count up to which an answer counts as short",
    )

    # ========================================
    # SM-2 Scheduling
    # ========================================
    sm2_initial_ease: float = Field(default=2.5, description="Ease factor for new words")
    sm2_minimum_ease: float = Field(default=1.3, description="Ease factor floor")
    sm2_first_interval: int = Field(default=1, description="Days after first correct answer")
    sm2_second_interval: int = Field(default=6, description="Days after second correct answer")
    sm2_ease_bonus: float = Field(default=0.1, description="Ease added on a correct answer")
    sm2_ease_penalty: float = Field(default=0.2, description="Ease removed on a miss")
    sm2_mastered_repetitions: int = Field(
        default=5,
        description="Consecutive correct answers required for the mastered tier",
    )
    sm2_mastered_interval_days: int = Field(
        default=21,
        description="Interval (days) required for the mastered tier",
    )

    # ========================================
    # Practice Sessions
    # ========================================
    practice_words_per_session: int = Field(
        default=6,
        description="Words picked from a lesson for one practice set",
    )
    practice_max_exercises: int = Field(
        default=10,
        description="Upper bound for adjusted exercise counts",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def has_judge_configured(self) -> bool:
        """Check if the remote answer judge can be called."""
        return bool(self.judge_api_key and self.judge_api_url)

    def get_judge_budget_seconds(self) -> float:
        """Upper bound for one judged answer: every attempt plus the backoff between them."""
        attempts = max(1, self.judge_retry_attempts)
        backoff = sum(self.judge_retry_backoff_seconds * 2**i for i in range(attempts - 1))
        return self.judge_timeout_seconds * attempts + backoff

    def get_evaluation_config(self) -> dict[str, Any]:
        """Get local evaluation thresholds as a dictionary."""
        return {
            "high": self.similarity_high_threshold,
            "medium": self.similarity_medium_threshold,
            "short_answer": self.short_answer_threshold,
            "short_answer_max_tokens": self.short_answer_max_tokens,
        }

    def get_sm2_config(self) -> dict[str, Any]:
        """Get SM-2 scheduling parameters as a dictionary."""
        return {
            "initial_ease": self.sm2_initial_ease,
            "minimum_ease": self.sm2_minimum_ease,
            "first_interval": self.sm2_first_interval,
            "second_interval": self.sm2_second_interval,
            "ease_bonus": self.sm2_ease_bonus,
            "ease_penalty": self.sm2_ease_penalty,
            "mastered_repetitions": self.sm2_mastered_repetitions,
            "mastered_interval_days": self.sm2_mastered_interval_days,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
