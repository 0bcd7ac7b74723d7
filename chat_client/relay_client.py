"""HTTP client for the relay endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from empathic_chatbot.models import MessageIn

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://127.0.0.1:8000"
RELAY_PATH = "/api/empathic-chatbot"


@dataclass(eq=False)
class RelayClientError(Exception):
    """Raised when a turn could not be completed."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class RelayClient:
    """Sends chat text to the relay and returns the reply text."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = DEFAULT_URL) -> None:
        self._client = client
        self._url = base_url.rstrip("/") + RELAY_PATH

    async def send(self, text: str) -> str | None:
        """Return the relay's ``response`` field, which may be empty."""

        payload = MessageIn(text=text).model_dump()
        try:
            response = await self._client.post(self._url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Relay request failed", exc_info=exc)
            raise RelayClientError(str(exc) or "An unknown error occurred.") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise RelayClientError(
                "Relay returned an unreadable response.",
                status_code=response.status_code,
            ) from exc

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            raise RelayClientError(
                error or "An API error occurred.", status_code=response.status_code
            )

        reply = data.get("response") if isinstance(data, dict) else None
        return reply if isinstance(reply, str) else None
