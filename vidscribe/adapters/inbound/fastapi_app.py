"""
FastAPI application - primary inbound adapter.
"""
from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vidscribe import __version__
from vidscribe.application.describe_video_service import USER_MESSAGE_PREFIX, to_user_message
from vidscribe.core.exceptions import (
    DecodeError,
    DescriptionServiceError,
    EmptyInputError,
    ExtractionCancelledError,
    ExtractionTimeoutError,
    InvalidArgumentError,
    InvalidDurationError,
    NoFramesExtractedError,
    UploadValidationError,
    VidScribeError,
)
from vidscribe.infrastructure.config import Settings
from vidscribe.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)

settings = Settings()

# First matching class wins, so subclasses come before their bases.
_STATUS_BY_ERROR: list[tuple[type[VidScribeError], int]] = [
    (EmptyInputError, 400),
    (InvalidArgumentError, 400),
    (UploadValidationError, 400),
    (DecodeError, 422),
    (InvalidDurationError, 422),
    (NoFramesExtractedError, 422),
    (ExtractionCancelledError, 499),
    (ExtractionTimeoutError, 504),
    (DescriptionServiceError, 502),
]


def status_for(exc: VidScribeError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    setup_logging(settings.logging.level)
    settings.validate_production()
    logger.info("VidScribe backend starting up...")
    from vidscribe.infrastructure.container import ApplicationContainer
    app.state.container = ApplicationContainer(settings)
    yield
    logger.info("VidScribe backend shutting down...")


app = FastAPI(
    title="VidScribe API",
    description="AI-generated structured descriptions of uploaded videos",
    version=__version__,
    lifespan=lifespan,
)

# CORS: restrict origins in production
_allowed_origin = os.environ.get("ALLOWED_ORIGIN", "")
if settings.app_env == "production" and _allowed_origin:
    _origins = [o.strip() for o in _allowed_origin.split(",") if o.strip()]
else:
    _origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log each request with method, path, status, and duration."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    if request.url.path.startswith("/api"):
        response.headers["cache-control"] = "no-store, no-cache, must-revalidate"
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.exception_handler(VidScribeError)
async def vidscribe_error_handler(request: Request, exc: VidScribeError):
    status_code = status_for(exc)
    prefix = getattr(request.state, "user_message_prefix", USER_MESSAGE_PREFIX)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": to_user_message(exc, prefix), "error": exc.code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": to_user_message(exc), "error": "internal_error"},
    )


# ── API routes ─────────────────────────────────────────────────

from vidscribe.adapters.inbound.api.describe import router as describe_router  # noqa: E402

app.include_router(describe_router, prefix="/api", tags=["describe"])


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "version": __version__,
        "describer_backend": settings.describer_backend,
    }
