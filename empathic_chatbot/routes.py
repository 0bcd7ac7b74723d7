"""HTTP handlers for the relay."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from empathic_chatbot.dependencies import get_relay
from empathic_chatbot.models import (
    ErrorResponse,
    InferenceFailure,
    RelayResponse,
)
from empathic_chatbot.services.gemini_relay import GeminiRelay, internal_failure

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/api/empathic-chatbot",
    response_model=RelayResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def empathic_chatbot(
    request: Request,
    relay: Annotated[GeminiRelay, Depends(get_relay)],
) -> JSONResponse:
    """Relay one chat message to Gemini and return its reply."""

    logger.info("Relay endpoint called", extra={"client": _client_repr(request)})

    try:
        body = await request.json()
    except ValueError as exc:
        return _error_response(internal_failure(exc))

    text = body.get("text") if isinstance(body, dict) else None
    result = await relay.handle(text)

    if isinstance(result, InferenceFailure):
        return _error_response(result)

    reply = RelayResponse(response=result.text, usage=result.usage)
    return JSONResponse(reply.model_dump(by_alias=True))


def _error_response(failure: InferenceFailure) -> JSONResponse:
    body = ErrorResponse(error=failure.message)
    return JSONResponse(body.model_dump(), status_code=failure.status_code)


def _client_repr(request: Request) -> str:
    """Render the remote client for logging purposes."""

    client = request.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"
