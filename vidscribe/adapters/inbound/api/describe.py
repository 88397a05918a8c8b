"""
Video description API routes.
"""
from __future__ import annotations

import logging
import os
import re
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from vidscribe.adapters.inbound.api.dependencies import (
    get_describe_service,
    get_extraction_service,
    get_settings,
)
from vidscribe.application.describe_video_service import EXTRACTION_MESSAGE_PREFIX, DescribeVideoService
from vidscribe.application.dto.describe_request import DescribeRequest
from vidscribe.core.entities.video_source import VideoSource
from vidscribe.core.exceptions import UploadValidationError
from vidscribe.infrastructure.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


def _sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent path traversal and invalid characters."""
    # Take only the basename (strip any directory components)
    filename = os.path.basename(filename.replace("\\", "/"))
    filename = filename.replace("\x00", "")
    filename = re.sub(r'[^\w\s\-.]', '_', filename)
    filename = re.sub(r'\.{2,}', '.', filename)
    filename = re.sub(r'_{2,}', '_', filename)
    if not filename or filename.startswith('.'):
        filename = "upload" + filename
    return filename


def _validate_video_upload(filename: str, content_type: Optional[str], settings: Settings) -> None:
    """Accept ``video/*`` uploads, or a known video extension when the type is generic."""
    if content_type and content_type.startswith("video/"):
        return
    ext = Path(filename).suffix.lower()
    if ext in settings.web.allowed_extensions:
        return
    raise UploadValidationError(
        f"Please upload a valid video file. Unsupported file type '{ext or content_type or 'unknown'}'. "
        f"Allowed: {', '.join(sorted(settings.web.allowed_extensions))}"
    )


@asynccontextmanager
async def _spooled_upload(file: UploadFile, settings: Settings) -> AsyncIterator[VideoSource]:
    """Stream the upload to a temporary file, yield it as a VideoSource, then delete it."""
    original_name = file.filename or "upload.mp4"
    _validate_video_upload(original_name, file.content_type, settings)

    safe_filename = _sanitize_filename(original_name)
    upload_dir = Path(settings.storage.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    video_path = upload_dir / f"{uuid.uuid4().hex}_{safe_filename}"

    max_size_bytes = settings.web.max_upload_size_mb * 1024 * 1024
    total_written = 0
    try:
        with open(video_path, "wb") as f:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_written += len(chunk)
                if total_written > max_size_bytes:
                    raise UploadValidationError(
                        f"File too large. Maximum size: {settings.web.max_upload_size_mb}MB"
                    )
                f.write(chunk)
        logger.info("Received upload %s (%d bytes)", safe_filename, total_written)
        yield VideoSource(
            path=str(video_path),
            filename=safe_filename,
            mime_type=file.content_type or "",
        )
    finally:
        if video_path.exists():
            video_path.unlink()


@router.post("/describe")
async def describe_video(
    file: UploadFile = File(...),
    frame_count: Optional[int] = Form(None),
    settings: Settings = Depends(get_settings),
    service: DescribeVideoService = Depends(get_describe_service),
):
    """Upload a video and return its AI-generated structured description."""
    async with _spooled_upload(file, settings) as source:
        result = await service.execute(DescribeRequest(source=source, frame_count=frame_count))
    return result.to_dict()


@router.post("/frames")
async def extract_frames(
    request: Request,
    file: UploadFile = File(...),
    frame_count: Optional[int] = Form(None),
    settings: Settings = Depends(get_settings),
    service: DescribeVideoService = Depends(get_extraction_service),
):
    """Upload a video and return the sampled frames without calling the AI model."""
    request.state.user_message_prefix = EXTRACTION_MESSAGE_PREFIX
    async with _spooled_upload(file, settings) as source:
        extraction = await service.extract_frames(source, frame_count)
    return {
        "frame_count": len(extraction),
        "requested_frame_count": extraction.requested_count,
        "duration_seconds": round(extraction.duration_seconds, 3),
        "frames": [frame.to_dict() for frame in extraction],
    }
