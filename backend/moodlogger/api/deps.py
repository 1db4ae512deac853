"""Shared FastAPI dependencies."""
import uuid
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Header, HTTPException, Query, Request

from moodlogger.config import get_settings
from moodlogger.services.gateway import GatewayClient

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_gateway(request: Request) -> GatewayClient:
    return request.app.state.context.gateway


def get_current_user_id(
    user_id: uuid.UUID | None = Header(default=None, alias="X-User-Id"),
) -> uuid.UUID:
    """Caller identity as asserted by the identity provider's gateway."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required.")
    return user_id


def get_timezone(tz: str | None = Query(default=None)) -> ZoneInfo:
    """Timezone used for calendar-day boundaries."""
    name = tz or get_settings().default_timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {name}")
