"""
Remote semantic answer judge.

The judge is a language model reached through an OpenAI-compatible
chat-completions endpoint. It is consulted when the local fast path cannot
accept an answer with high confidence.

Failures never raise: every call returns a JudgeOutcome that either carries
a Verdict or explains why the judge was unavailable (missing key, timeout,
non-2xx status, malformed payload).
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import get_settings

from .local import is_idiom_lesson
from .models import AnswerRecord, Confidence, Verdict
from .prompts import build_system_prompt, build_user_prompt

_JSON_DECODER = json.JSONDecoder()


# =============================================================================
# Request / Outcome
# =============================================================================


@dataclass(frozen=True)
class JudgeRequest:
    """Everything the judge needs to grade one answer."""

    user_answer: str
    correct_answer: str
    exercise_type: str
    context: str | None = None
    lesson_kind: str | None = None

    @property
    def is_idiom(self) -> bool:
        return is_idiom_lesson(self.lesson_kind)

    @classmethod
    def from_record(cls, record: AnswerRecord) -> JudgeRequest:
        return cls(
            user_answer=record.user_answer,
            correct_answer=record.correct_answer,
            exercise_type=record.exercise_type_name,
            context=record.context or None,
            lesson_kind=record.lesson_kind or None,
        )


@dataclass(frozen=True)
class JudgeOutcome:
    """Result of a judge call: a verdict, or the reason there is none."""

    verdict: Verdict | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.verdict is not None

    @classmethod
    def success(cls, verdict: Verdict) -> JudgeOutcome:
        return cls(verdict=verdict)

    @classmethod
    def unavailable(cls, error: str) -> JudgeOutcome:
        return cls(error=error)


class AnswerJudge(Protocol):
    """Protocol for semantic answer judges."""

    async def judge(self, request: JudgeRequest) -> JudgeOutcome:
        """Grade one answer. Should not raise; failures go in the outcome."""
        ...


class JudgeVerdictPayload(BaseModel):
    """JSON object the judge model is asked to reply with."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_correct: bool = Field(alias="isCorrect")
    confidence: Confidence = Confidence.MEDIUM
    reason: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _lowercase_confidence(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_verdict(self) -> Verdict:
        return Verdict(
            is_correct=self.is_correct,
            confidence=self.confidence,
            reason=self.reason or None,
        )


def parse_judge_content(content: str) -> Verdict | None:
    """
    Extract the verdict JSON object from the model's message text.

    The first object that decodes and validates wins; surrounding prose,
    markdown fences and later braces are ignored.
    """
    content = content or ""
    start = content.find("{")
    while start != -1:
        try:
            data, _ = _JSON_DECODER.raw_decode(content, start)
            return JudgeVerdictPayload.model_validate(data).to_verdict()
        except (json.JSONDecodeError, ValidationError):
            start = content.find("{", start + 1)
    return None


# =============================================================================
# HTTP Judge
# =============================================================================


class HttpAnswerJudge:
    """Semantic judge backed by an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
        retry_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
        temperature: float | None = None,
        reason_language: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the judge. Unset arguments fall back to settings.

        Args:
            api_url: Base URL (".../v1"); "/chat/completions" is appended
            api_key: Bearer key; the judge reports itself unavailable without one
            model: Model name
            timeout_seconds: Request timeout
            retry_attempts: Attempts for timeouts, request errors and 5xx
            retry_backoff_seconds: Base delay for exponential backoff
            temperature: Sampling temperature
            reason_language: Language for the verdict reason
            client: Pre-built httpx client (tests, connection sharing)
        """
        settings = get_settings()
        self.api_url = (api_url or settings.judge_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.judge_api_key
        self.model = model or settings.judge_model
        self.timeout_seconds = timeout_seconds or settings.judge_timeout_seconds
        self.retry_attempts = max(1, retry_attempts or settings.judge_retry_attempts)
        self.retry_backoff_seconds = (
            retry_backoff_seconds
            if retry_backoff_seconds is not None
            else settings.judge_retry_backoff_seconds
        )
        self.temperature = temperature if temperature is not None else settings.judge_temperature
        self.reason_language = reason_language or settings.judge_reason_language
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def build_payload(self, request: JudgeRequest) -> dict[str, Any]:
        """Build the chat-completions request body."""
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": build_system_prompt(request.is_idiom, self.reason_language),
                },
                {
                    "role": "user",
                    "content": build_user_prompt(
                        exercise_type=request.exercise_type,
                        correct_answer=request.correct_answer,
                        user_answer=request.user_answer,
                        context=request.context,
                        is_idiom=request.is_idiom,
                    ),
                },
            ],
            "temperature": self.temperature,
        }

    async def judge(self, request: JudgeRequest) -> JudgeOutcome:
        """
        Ask the judge model for a verdict, with retry logic.

        Args:
            request: The answer to grade

        Returns:
            JudgeOutcome with a verdict, or an error description
        """
        if not self.is_configured:
            return JudgeOutcome.unavailable("judge API key not configured")

        payload = self.build_payload(request)
        headers = {"Authorization": f"Bearer {self.api_key}"}
        last_error: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.post(
                    f"{self.api_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
                return self._parse_response(response)

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    f"Judge timeout on attempt {attempt + 1}/{self.retry_attempts}"
                )

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code < 500:
                    # Client errors (bad key, bad request) won't fix themselves
                    logger.error(f"Judge client error: {e.response.status_code}")
                    return JudgeOutcome.unavailable(
                        f"judge returned HTTP {e.response.status_code}"
                    )
                logger.warning(
                    f"Judge server error {e.response.status_code} on attempt "
                    f"{attempt + 1}/{self.retry_attempts}"
                )

            except httpx.RequestError as e:
                last_error = e
                logger.warning(
                    f"Judge request error on attempt {attempt + 1}/{self.retry_attempts}: {e}"
                )

            if attempt < self.retry_attempts - 1:
                await asyncio.sleep(self.retry_backoff_seconds * 2**attempt)

        logger.error(f"Judge failed after {self.retry_attempts} attempts: {last_error!r}")
        return JudgeOutcome.unavailable(f"judge unavailable: {last_error!r}")

    def _parse_response(self, response: httpx.Response) -> JudgeOutcome:
        """Turn a chat-completions response into an outcome."""
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            logger.warning("Judge response did not have the chat-completions shape")
            return JudgeOutcome.unavailable("malformed judge response")

        verdict = parse_judge_content(content if isinstance(content, str) else "")
        if verdict is None:
            logger.warning(f"Failed to parse judge verdict: {str(content)[:200]}")
            return JudgeOutcome.unavailable("malformed judge verdict")

        return JudgeOutcome.success(verdict)
