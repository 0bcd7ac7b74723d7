"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI

from empathic_chatbot import __version__
from empathic_chatbot.config import Settings, get_settings
from empathic_chatbot.logging import configure_logging
from empathic_chatbot.routes import router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create application resources during startup and clean up on shutdown."""

    async with httpx.AsyncClient() as client:
        app.state.http_client = client
        yield
        del app.state.http_client


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Empathic Chatbot Relay",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    app.include_router(router)

    return app


def serve() -> None:
    """Run the relay under uvicorn."""

    settings = get_settings()
    uvicorn.run(
        "empathic_chatbot.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


app = create_app()
