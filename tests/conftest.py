"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("ENVIRONMENT", "test")

from empathic_chatbot.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def gemini_reply():
    """Builder for generateContent payloads shaped like the provider's."""

    return build_gemini_reply


def build_gemini_reply(
    text: str | None = "Hello there.",
    finish_reason: str | None = "STOP",
    usage: dict | None = None,
) -> dict:
    candidate: dict = {"content": {"role": "model", "parts": [{"text": text}]}}
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    payload: dict = {"candidates": [candidate]}
    if usage is not None:
        payload["usageMetadata"] = usage
    return payload
