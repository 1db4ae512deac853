import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from moodlogger.api.deps import CORS_HEADERS
from moodlogger.api.router import api_router
from moodlogger.config import get_settings
from moodlogger.context import AppContext
from moodlogger.services.gateway import GatewayNotConfigured
from moodlogger.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("MoodLogger backend starting up...")
    app.state.context = await AppContext.create(settings)
    try:
        yield
    finally:
        await app.state.context.close()
        logger.info("MoodLogger backend shutting down...")


app = FastAPI(
    title="MoodLogger",
    description="Student wellbeing API: mood logging, journaling and supportive chat",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)


def _describe_errors(errors: list[dict]) -> list[dict]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected invalid input on {request.url.path}: {len(exc.errors())} error(s)")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "details": _describe_errors(exc.errors())},
        headers=CORS_HEADERS,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(GatewayNotConfigured)
async def gateway_not_configured_handler(request: Request, exc: GatewayNotConfigured):
    logger.critical(f"Misconfiguration on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={"error": exc.message},
        headers=CORS_HEADERS,
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    logger.exception("Internal server error")
    return JSONResponse(
        status_code=500,
        content={"error": "An internal error occurred. Please try again later."},
    )
