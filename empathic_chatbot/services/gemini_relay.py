"""Adapter for Gemini generateContent.

A turn is one POST to the provider. The reply payload is treated as untyped
JSON: every field is looked up defensively and the outcome is reduced to an
``InferenceSuccess`` or an ``InferenceFailure``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from empathic_chatbot.config import Settings
from empathic_chatbot.exceptions import (
    AbnormalFinishError,
    EmptyResultError,
    InternalRelayError,
    InvalidInputError,
    MissingCredentialError,
    ProviderError,
    ServiceError,
)
from empathic_chatbot.models import (
    InferenceFailure,
    InferenceRequest,
    InferenceResult,
    InferenceSuccess,
    Usage,
)

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an experimental chatbot for a psychology study. Your task is to "
    "provide a response that is neutral, and very short (20-25 words)"
)

NORMAL_FINISH = "STOP"
TRUNCATED_FINISH = "MAX_TOKENS"


class GeminiRelay:
    """Brokers a single chat turn between a client and Gemini."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def handle(self, text: Any) -> InferenceResult:
        """Relay ``text`` to the provider and classify the outcome."""

        logger.info("Relay turn requested")
        try:
            if not isinstance(text, str) or not text:
                raise InvalidInputError()
            api_key = self._settings.gemini_api_key
            if not api_key:
                raise MissingCredentialError()
            status_code, payload = await self._generate(text, api_key)
            return classify_response(status_code, payload)
        except ServiceError as exc:
            return failure_from_error(exc)
        except Exception as exc:
            return internal_failure(exc)

    def build_request(self, text: str) -> InferenceRequest:
        return InferenceRequest(
            user_text=text,
            system_instruction=SYSTEM_INSTRUCTION,
            max_output_tokens=self._settings.max_output_tokens,
            temperature=self._settings.temperature,
        )

    async def _generate(self, text: str, api_key: str) -> tuple[int, Any]:
        request = self.build_request(text)
        timeout = self._settings.relay_timeout
        response = await self._client.post(
            self._settings.generate_content_url,
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            json=request.to_payload(),
            timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
        )
        payload = response.json()
        logger.info(
            "Gemini raw response",
            extra={
                "status_code": response.status_code,
                "raw_response": json.dumps(payload, indent=2),
            },
        )
        return response.status_code, payload


def classify_response(status_code: int, payload: Any) -> InferenceResult:
    """Reduce a provider reply to a success or a failure.

    Checks run in order: provider error, missing candidate, abnormal finish
    reason, empty text. Usage counters default to zero.
    """

    try:
        data = _mapping(payload)
        _check_provider_error(status_code, data)
        candidate = _first_candidate(data)
        _check_finish_reason(candidate)
        text = _candidate_text(candidate)
    except ServiceError as exc:
        return failure_from_error(exc)

    return InferenceSuccess(text=text, usage=_usage(data))


def failure_from_error(exc: ServiceError) -> InferenceFailure:
    logger.error(
        "Relay turn failed",
        extra={"error": exc.code, "status_code": exc.status_code, "detail": exc.message},
    )
    return InferenceFailure(
        error=exc.code, message=exc.message, status_code=exc.status_code
    )


def internal_failure(exc: BaseException) -> InferenceFailure:
    """Report an unexpected exception as an internal error."""

    logger.exception("Unexpected relay failure", exc_info=exc)
    detail = str(exc)
    if detail:
        message = f"Failed to generate response: {detail}"
    else:
        message = "Failed to generate response due to an unknown error."
    return failure_from_error(InternalRelayError(message))


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _check_provider_error(status_code: int, data: Mapping[str, Any]) -> None:
    error = data.get("error")
    ok = 200 <= status_code < 300
    if ok and not error:
        return

    detail = error if isinstance(error, str) else _mapping(error).get("message")
    message = f"Gemini API error: {detail or 'Unknown error'}"
    raise ProviderError(message, status_code=status_code if not ok else 500)


def _first_candidate(data: Mapping[str, Any]) -> Mapping[str, Any]:
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates:
        candidate = candidates[0]
        if isinstance(candidate, Mapping):
            return candidate
    raise EmptyResultError("No response candidate found.")


def _check_finish_reason(candidate: Mapping[str, Any]) -> None:
    reason = candidate.get("finishReason")
    if not reason or reason == NORMAL_FINISH:
        return

    logger.warning("Gemini finished abnormally", extra={"finish_reason": reason})
    if reason == TRUNCATED_FINISH:
        raise AbnormalFinishError("Model output was cut off (MAX_TOKENS).")
    raise AbnormalFinishError(
        f"Gemini stopped generating for an unexpected reason: {reason}"
    )


def _candidate_text(candidate: Mapping[str, Any]) -> str:
    parts = _mapping(candidate.get("content")).get("parts")
    text = None
    if isinstance(parts, list) and parts:
        text = _mapping(parts[0]).get("text")
    if isinstance(text, str) and text.strip():
        return text.strip()
    raise EmptyResultError("Invalid or empty response from Gemini API")


def _usage(data: Mapping[str, Any]) -> Usage:
    metadata = _mapping(data.get("usageMetadata"))
    return Usage(
        prompt_tokens=_count(metadata.get("promptTokenCount")),
        candidates_tokens=_count(metadata.get("candidatesTokenCount")),
        total_tokens=_count(metadata.get("totalTokenCount")),
    )


def _count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value
