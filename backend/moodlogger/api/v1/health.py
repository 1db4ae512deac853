"""Health check endpoint with dependency verification."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from moodlogger.context import AppContext

router = APIRouter()
logger = logging.getLogger(__name__)


async def check_database(context: AppContext) -> str:
    try:
        async with context.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return f"error: {type(e).__name__}"
    return "ok"


def check_gateway(context: AppContext) -> str:
    """Credential presence only; the gateway itself is never called."""
    if context.settings.gateway_configured:
        return "ok"
    return "error: credential not configured"


@router.get("/health")
async def health_check(request: Request):
    """
    Report whether the service can reach its dependencies.

    Checks:
    - Hosted store connectivity (SELECT 1)
    - LLM gateway credential configured

    Returns 200 when every check passes, 503 otherwise.
    """
    context: AppContext = request.app.state.context
    checks = {
        "database": await check_database(context),
        "llm_gateway": check_gateway(context),
    }
    healthy = all(result == "ok" for result in checks.values())

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": "moodlogger",
            "checks": checks,
        },
    )
