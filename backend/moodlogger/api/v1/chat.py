"""Chat proxy endpoints.

Relay variants stream the gateway's event stream back unchanged; the insight
variant returns one JSON object. All responses carry permissive CORS headers.
"""
import logging
import uuid
from collections.abc import AsyncIterator

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import CORS_HEADERS, get_gateway
from moodlogger.db.session import get_db
from moodlogger.schemas.chat import (
    ConversationRequest,
    MoodInsightRequest,
    MoodInsightResponse,
    PersonalizedConversationRequest,
)
from moodlogger.services.chat_proxy import (
    ChatProxy,
    build_insight_messages,
    mood_chat,
    mood_insights,
    therapy_chat,
)
from moodlogger.services.gateway import GatewayClient, GatewayError

logger = logging.getLogger(__name__)
router = APIRouter()


def gateway_error_response(error: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.message},
        headers=CORS_HEADERS,
    )


async def relay_stream(upstream: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the upstream body, closing the upstream even if the client leaves."""
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()


async def proxy_response(
    proxy: ChatProxy,
    gateway: GatewayClient,
    messages: list[dict],
    db: AsyncSession | None = None,
    user_id: uuid.UUID | None = None,
) -> Response:
    """Run ``proxy`` and shape its result as an HTTP response."""
    try:
        if not proxy.streaming:
            text = await proxy.complete(gateway, messages, db=db, user_id=user_id)
            return JSONResponse(
                content=MoodInsightResponse(insight=text).model_dump(),
                headers=CORS_HEADERS,
            )
        upstream = await proxy.relay(gateway, messages, db=db, user_id=user_id)
    except GatewayError as e:
        return gateway_error_response(e)

    logger.info(f"[{proxy.name}] streaming response back to client")
    return StreamingResponse(
        relay_stream(upstream),
        media_type="text/event-stream",
        headers=CORS_HEADERS,
    )


def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.options("/chat/therapy")
async def therapy_chat_preflight():
    return preflight()


@router.post("/chat/therapy")
async def send_therapy_message(
    request: ConversationRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    """Relay a therapy conversation turn as an event stream."""
    messages = [m.model_dump() for m in request.messages]
    return await proxy_response(therapy_chat, gateway, messages)


@router.options("/chat/mood")
async def mood_chat_preflight():
    return preflight()


@router.post("/chat/mood")
async def send_mood_message(
    request: PersonalizedConversationRequest,
    gateway: GatewayClient = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Relay a mood support turn, personalized from the user's survey."""
    messages = [m.model_dump() for m in request.messages]
    return await proxy_response(mood_chat, gateway, messages, db=db, user_id=request.user_id)


@router.options("/insights/mood")
async def mood_insight_preflight():
    return preflight()


@router.post("/insights/mood", response_model=MoodInsightResponse)
async def get_mood_insight(
    request: MoodInsightRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    """Generate a short supportive insight for a logged mood."""
    messages = build_insight_messages(request.mood_level, request.note)
    return await proxy_response(mood_insights, gateway, messages)
