"""FastAPI dependencies resolving application services from the container."""
from __future__ import annotations

from fastapi import Request

from vidscribe.application.describe_video_service import DescribeVideoService
from vidscribe.core.exceptions import DescriptionServiceError
from vidscribe.infrastructure.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.container.settings


def get_describe_service(request: Request) -> DescribeVideoService:
    """Build the describe service from the container attached at startup."""
    try:
        return request.app.state.container.describe_video_service()
    except ValueError as exc:
        # Describer backend misconfigured, e.g. no API key in development.
        raise DescriptionServiceError(f"The AI description service is not configured: {exc}") from exc


def get_extraction_service(request: Request) -> DescribeVideoService:
    """Frame extraction only; works without a describer backend."""
    return request.app.state.container.extraction_service()
