"""
Describe-video use case.
Samples frames from the uploaded video and hands them to the AI describer,
all under one deadline.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from vidscribe.application.dto.describe_request import DescribeRequest
from vidscribe.application.dto.describe_result import DescribeResult
from vidscribe.core.entities.frame import ExtractionResult
from vidscribe.core.entities.video_description import VideoDescription
from vidscribe.core.entities.video_source import VideoSource
from vidscribe.core.exceptions import (
    DescriptionParseError,
    DescriptionServiceError,
    ExtractionTimeoutError,
    InvalidArgumentError,
    NoFramesExtractedError,
    VidScribeError,
)
from vidscribe.core.value_objects.cancellation import CancellationToken

logger = logging.getLogger(__name__)

USER_MESSAGE_PREFIX = "Failed to generate description: "
EXTRACTION_MESSAGE_PREFIX = "Failed to extract frames: "


def to_user_message(exc: BaseException, prefix: str = USER_MESSAGE_PREFIX) -> str:
    """Map any pipeline failure to the text shown to the user."""
    if isinstance(exc, VidScribeError):
        return f"{prefix}{exc.message}"
    return f"{prefix}An unknown error occurred."


class DescribeVideoService:
    """Orchestrates frame extraction and AI description under a shared deadline."""

    def __init__(
        self,
        sampler,      # ExtractFramesUseCase
        describer,    # VideoDescriberPort, or None for extraction-only use
        timeout_seconds: float = 30.0,
        default_frame_count: int = 5,
        max_frame_count: int = 32,
    ):
        self._sampler = sampler
        self._describer = describer
        self._timeout_seconds = timeout_seconds
        self._default_frame_count = default_frame_count
        self._max_frame_count = max_frame_count

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def execute(self, request: DescribeRequest) -> DescribeResult:
        """Run extraction then description; fail with the first error encountered."""
        frame_count = self._resolve_frame_count(request.frame_count)
        logger.info(
            "[%s] Describing %s with %d frames (deadline %.1fs)",
            request.request_id, request.source.filename, frame_count, self._timeout_seconds,
        )
        token = CancellationToken()
        try:
            return await self._with_deadline(
                self._describe(request, frame_count, token), token
            )
        except VidScribeError as exc:
            logger.error("[%s] %s", request.request_id, to_user_message(exc))
            raise

    async def extract_frames(
        self,
        source: VideoSource,
        frame_count: Optional[int] = None,
    ) -> ExtractionResult:
        """Extraction only, under the same deadline and empty-result rule."""
        count = self._resolve_frame_count(frame_count)
        token = CancellationToken()
        return await self._with_deadline(self._extract(source, count, token), token)

    # -- Pipeline steps ------------------------------------------------

    async def _describe(
        self,
        request: DescribeRequest,
        frame_count: int,
        token: CancellationToken,
    ) -> DescribeResult:
        started = time.perf_counter()
        extraction = await self._extract(request.source, frame_count, token)
        extracted = time.perf_counter()

        description = await self._call_describer(extraction.payloads)
        finished = time.perf_counter()

        logger.info(
            "[%s] Description ready: %d frames, extraction %.0fms, description %.0fms",
            request.request_id, len(extraction),
            (extracted - started) * 1000, (finished - extracted) * 1000,
        )
        return DescribeResult(
            request_id=request.request_id,
            description=description,
            frame_count=len(extraction),
            requested_frame_count=frame_count,
            timestamps=extraction.timestamps,
            duration_seconds=extraction.duration_seconds,
            extraction_ms=(extracted - started) * 1000,
            description_ms=(finished - extracted) * 1000,
        )

    async def _extract(
        self,
        source: VideoSource,
        frame_count: int,
        token: CancellationToken,
    ) -> ExtractionResult:
        extraction = await self._sampler.extract(source, frame_count, token)
        if extraction.is_empty:
            raise NoFramesExtractedError()
        if extraction.is_partial:
            logger.warning(
                "Only %d of %d frames could be sampled from %s",
                len(extraction), frame_count, source.filename,
            )
        return extraction

    async def _call_describer(self, payloads: list[str]) -> VideoDescription:
        if self._describer is None:
            raise DescriptionServiceError("No AI description service is configured.")
        try:
            description = await self._describer.describe(payloads)
        except VidScribeError:
            raise
        except Exception as exc:
            logger.error("Error calling description service: %s", exc)
            raise DescriptionServiceError() from exc
        if description.is_empty:
            raise DescriptionParseError("The AI model returned an empty description.")
        return description

    # -- Helpers -------------------------------------------------------

    async def _with_deadline(self, coro, token: CancellationToken):
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            token.cancel("deadline exceeded")
            logger.warning("Pipeline deadline of %.1fs exceeded", self._timeout_seconds)
            raise ExtractionTimeoutError(self._timeout_seconds) from None

    def _resolve_frame_count(self, frame_count: Optional[int]) -> int:
        if frame_count is None:
            return self._default_frame_count
        if isinstance(frame_count, bool) or not isinstance(frame_count, int) or frame_count < 1:
            raise InvalidArgumentError(f"frame_count must be a positive integer, got {frame_count!r}")
        if frame_count > self._max_frame_count:
            raise InvalidArgumentError(
                f"frame_count must not exceed {self._max_frame_count}, got {frame_count}"
            )
        return frame_count
