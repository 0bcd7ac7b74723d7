"""In-memory state of one chat session.

The transcript only grows. A submission either is ignored, shows the overlay,
or completes one exchange that appends a user message and then exactly one
model message, whether the relay succeeded or not.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Callable, Protocol

from chat_client.relay_client import RelayClientError
from empathic_chatbot.models import Message

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hello! I'm Aura, your empathetic AI companion. Feel free to share what's "
    "on your mind. How are you doing today?"
)
FALLBACK_MESSAGE = "I'm not sure how to respond to that. Could you try rephrasing?"
TRIGGER_PHRASE = "tapos na ba?"
OVERLAY_SECONDS = 7.0


class ReplySource(Protocol):
    async def send(self, text: str) -> str | None: ...


class SubmitOutcome(enum.Enum):
    IGNORED = "ignored"
    OVERLAY = "overlay"
    REPLIED = "replied"


class ChatSession:
    """Chat transcript plus the loading and overlay flags of one page load."""

    def __init__(
        self,
        relay: ReplySource,
        *,
        trigger_phrase: str = TRIGGER_PHRASE,
        overlay_seconds: float = OVERLAY_SECONDS,
    ) -> None:
        self._relay = relay
        self._trigger = trigger_phrase.strip().lower()
        self._overlay_seconds = overlay_seconds
        self._messages: list[Message] = [Message(role="model", content=WELCOME_MESSAGE)]
        self._message_listeners: list[Callable[[Message], None]] = []
        self._overlay_listeners: list[Callable[[bool], None]] = []
        self._awaiting_listeners: list[Callable[[bool], None]] = []
        self.awaiting_reply = False
        self.overlay_visible = False

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def on_message(self, listener: Callable[[Message], None]) -> None:
        self._message_listeners.append(listener)

    def on_overlay(self, listener: Callable[[bool], None]) -> None:
        self._overlay_listeners.append(listener)

    def on_awaiting(self, listener: Callable[[bool], None]) -> None:
        self._awaiting_listeners.append(listener)

    def accepts_input(self) -> bool:
        return not (self.awaiting_reply or self.overlay_visible)

    async def submit(self, text: str) -> SubmitOutcome:
        """Handle one line of user input."""

        if not text.strip() or not self.accepts_input():
            return SubmitOutcome.IGNORED

        if text.strip().lower() == self._trigger:
            self._show_overlay()
            return SubmitOutcome.OVERLAY

        self._append(Message(role="user", content=text))
        self._set_awaiting(True)
        try:
            reply = await self._relay.send(text)
        except RelayClientError as exc:
            logger.error("Chat turn failed", extra={"detail": exc.message})
            content = f"Sorry, something went wrong: {exc.message}"
        except Exception as exc:
            logger.exception("Chat turn failed unexpectedly")
            detail = str(exc) or "An unknown error occurred."
            content = f"Sorry, something went wrong: {detail}"
        else:
            content = reply if isinstance(reply, str) and reply else FALLBACK_MESSAGE
        finally:
            self._set_awaiting(False)

        self._append(Message(role="model", content=content))
        return SubmitOutcome.REPLIED

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        for listener in self._message_listeners:
            listener(message)

    def _show_overlay(self) -> None:
        # Each trigger schedules its own hide; nothing cancels it.
        self._set_overlay(True)
        loop = asyncio.get_running_loop()
        loop.call_later(self._overlay_seconds, self._set_overlay, False)

    def _set_awaiting(self, awaiting: bool) -> None:
        self.awaiting_reply = awaiting
        for listener in self._awaiting_listeners:
            listener(awaiting)

    def _set_overlay(self, visible: bool) -> None:
        self.overlay_visible = visible
        for listener in self._overlay_listeners:
            listener(visible)
