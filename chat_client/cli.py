"""Interactive terminal front end for a chat session."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

from chat_client.relay_client import DEFAULT_URL, RelayClient
from chat_client.session import ChatSession, SubmitOutcome
from empathic_chatbot.models import Message

QUIT_COMMAND = "/quit"
OVERLAY_URL = "https://www.youtube.com/embed/hGNLYgmMq1c?autoplay=1"


def render_message(message: Message) -> None:
    label = "You" if message.role == "user" else "Aura"
    print(f"{label}: {message.content}", flush=True)


def render_awaiting(awaiting: bool) -> None:
    if awaiting:
        print("Aura is typing...", flush=True)


def render_overlay(visible: bool) -> None:
    if visible:
        print(f"[overlay] {OVERLAY_URL}", flush=True)
    else:
        print("[overlay closed]", flush=True)


async def run_session(url: str, texts: list[str] | None) -> None:
    """Drive a chat session from ``texts`` or, when empty, from stdin."""

    logger = logging.getLogger("chat_client")

    async with httpx.AsyncClient() as client:
        session = ChatSession(RelayClient(client, url))
        for message in session.messages:
            render_message(message)
        session.on_message(render_message)
        session.on_overlay(render_overlay)
        session.on_awaiting(render_awaiting)

        if texts:
            for text in texts:
                await _submit(session, text, logger)
            return

        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line or line.strip() == QUIT_COMMAND:
                break
            await _submit(session, line.rstrip("\n"), logger)


async def _submit(session: ChatSession, text: str, logger: logging.Logger) -> None:
    outcome = await session.submit(text)
    if outcome is SubmitOutcome.IGNORED and text.strip():
        logger.info("Input ignored while the session is busy")
    if outcome is SubmitOutcome.OVERLAY and session.overlay_visible:
        # Hold input until the overlay hides itself.
        while session.overlay_visible:
            await asyncio.sleep(0.1)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the empathic-chatbot relay.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Relay base URL (default: %(default)s)")
    parser.add_argument(
        "--text",
        action="append",
        help="Message to send; repeat for several turns. Reads stdin when omitted.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    try:
        asyncio.run(run_session(args.url, args.text))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        pass


if __name__ == "__main__":  # pragma: no cover
    main()
