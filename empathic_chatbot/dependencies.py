"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from empathic_chatbot.config import Settings, get_settings
from empathic_chatbot.services.gemini_relay import GeminiRelay


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_relay(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GeminiRelay:
    """Dependency provider for GeminiRelay."""

    return GeminiRelay(client=client, settings=settings)
