"""
Frame sampling extraction pipeline - the core of VidScribe.

Opens one decoding session per call, seeks through evenly spaced timestamps and
encodes the picture found at each one as a base64 JPEG. Decoder events
(metadata loaded, seek completed, error) are modelled as explicit states driven
by a single loop, and every resource acquired along the way is released exactly
once whichever way the extraction ends.
"""
from __future__ import annotations

import asyncio
import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

from vidscribe.core.entities.frame import ExtractionResult, Frame
from vidscribe.core.entities.video_metadata import VideoMetadata
from vidscribe.core.entities.video_source import VideoSource
from vidscribe.core.exceptions import (
    DecodeError,
    DecodeFailure,
    EmptyInputError,
    ExtractionCancelledError,
    InvalidArgumentError,
    InvalidDurationError,
    MetadataUnavailableError,
    VidScribeError,
)
from vidscribe.core.value_objects.cancellation import CancellationToken
from vidscribe.core.value_objects.sample_timestamps import SampleTimestamps
from vidscribe.ports.outbound.frame_renderer_port import FrameRendererPort, RenderSurfacePort
from vidscribe.ports.outbound.video_decoder_port import DecodingSessionPort, VideoDecoderPort

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY: float = 0.8

_T = TypeVar("_T")


class SamplerState(str, Enum):
    INIT = "init"
    AWAIT_METADATA = "await_metadata"
    VALIDATE_METADATA = "validate_metadata"
    SAMPLING = "sampling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SamplerState.COMPLETED, SamplerState.FAILED, SamplerState.CANCELLED)


class FrameSampler:
    """Extracts a fixed number of representative JPEG stills from a video.

    Satisfies :class:`~vidscribe.ports.inbound.extract_frames_use_case.ExtractFramesUseCase`.

    The sampler holds no per-extraction state, so one instance can serve
    concurrent extractions of different sources.
    """

    def __init__(
        self,
        decoder: VideoDecoderPort,
        renderer: FrameRendererPort,
        jpeg_quality: float = DEFAULT_JPEG_QUALITY,
    ) -> None:
        if not 0.0 < jpeg_quality <= 1.0:
            raise ValueError(f"jpeg_quality must be in (0, 1], got {jpeg_quality}")
        self._decoder = decoder
        self._renderer = renderer
        self._jpeg_quality = jpeg_quality

    @property
    def jpeg_quality(self) -> float:
        return self._jpeg_quality

    async def extract(
        self,
        source: VideoSource,
        frame_count: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ExtractionResult:
        """Sample *frame_count* frames evenly across *source*.

        Raises before any decoding work when the source is empty or the count is
        not a positive integer. Any failure after that discards frames already
        captured; no partial result is ever returned.
        """
        if source.is_empty:
            raise EmptyInputError()
        if isinstance(frame_count, bool) or not isinstance(frame_count, int) or frame_count < 1:
            raise InvalidArgumentError(f"frame_count must be a positive integer, got {frame_count!r}")

        run = _ExtractionRun(
            decoder=self._decoder,
            renderer=self._renderer,
            source=source,
            frame_count=frame_count,
            jpeg_quality=self._jpeg_quality,
            cancel_token=cancel_token or CancellationToken(),
        )
        return await run.execute()


class _ExtractionRun:
    """State of a single ``extract`` call.

    Every decoder and surface call runs on one dedicated worker thread, so seeks
    on the session are strictly sequential and teardown is always queued behind
    whatever call is in flight.
    """

    def __init__(
        self,
        decoder: VideoDecoderPort,
        renderer: FrameRendererPort,
        source: VideoSource,
        frame_count: int,
        jpeg_quality: float,
        cancel_token: CancellationToken,
    ) -> None:
        self._decoder = decoder
        self._renderer = renderer
        self._source = source
        self._frame_count = frame_count
        self._jpeg_quality = jpeg_quality
        self._cancel_token = cancel_token

        self.state = SamplerState.INIT
        self._session: Optional[DecodingSessionPort] = None
        self._surface: Optional[RenderSurfacePort] = None
        self._metadata: Optional[VideoMetadata] = None
        self._timestamps: Optional[SampleTimestamps] = None
        self._frames: list[Frame] = []
        self._error: Optional[VidScribeError] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frame-sampler")

    async def execute(self) -> ExtractionResult:
        handlers: dict[SamplerState, Callable[[], Awaitable[SamplerState]]] = {
            SamplerState.INIT: self._open_session,
            SamplerState.AWAIT_METADATA: self._await_metadata,
            SamplerState.VALIDATE_METADATA: self._validate_metadata,
            SamplerState.SAMPLING: self._sample,
        }
        abandoned = False
        try:
            while not self.state.is_terminal:
                try:
                    self._cancel_token.raise_if_cancelled()
                    next_state = await handlers[self.state]()
                except ExtractionCancelledError as exc:
                    self._error = exc
                    next_state = SamplerState.CANCELLED
                except VidScribeError as exc:
                    self._error = exc
                    next_state = SamplerState.FAILED
                self._transition(next_state)
        except asyncio.CancelledError:
            abandoned = True
            self._cancel_token.cancel("task cancelled")
            self._transition(SamplerState.CANCELLED)
            raise
        finally:
            release = self._executor.submit(self._release_resources)
            self._executor.shutdown(wait=False)
            if not abandoned:
                await asyncio.wrap_future(release)

        if self.state is SamplerState.COMPLETED:
            return ExtractionResult(
                frames=tuple(self._frames),
                requested_count=self._frame_count,
                duration_seconds=self._metadata.duration_seconds if self._metadata else 0.0,
            )
        self._frames.clear()
        raise self._require(self._error, "failure reason")

    # -- States ----------------------------------------------------------------

    async def _open_session(self) -> SamplerState:
        logger.info(
            "Opening decoding session for %s (%d bytes, mime=%s)",
            self._source.filename, self._source.size_bytes, self._source.mime_type or "unknown",
        )
        await self._run(self._open_in_worker)
        return SamplerState.AWAIT_METADATA

    async def _await_metadata(self) -> SamplerState:
        session = self._require(self._session, "decoding session")
        metadata: VideoMetadata = await self._run(self._decoder_call, session.load_metadata)
        if not metadata.has_dimensions:
            raise MetadataUnavailableError(
                f"decoder reported {metadata.width}x{metadata.height} for {self._source.filename}"
            )
        self._metadata = metadata
        logger.info(
            "Video metadata - duration: %s (%.2fs), resolution: %s, fps: %.2f",
            metadata.duration_formatted, metadata.duration_seconds,
            metadata.resolution_str, metadata.fps,
        )
        return SamplerState.VALIDATE_METADATA

    async def _validate_metadata(self) -> SamplerState:
        metadata = self._require(self._metadata, "video metadata")
        if not metadata.has_valid_duration:
            logger.warning(
                "Rejecting %s: duration %r is zero or not finite",
                self._source.filename, metadata.duration_seconds,
            )
            raise InvalidDurationError()

        self._timestamps = SampleTimestamps.evenly_spaced(metadata.duration_seconds, self._frame_count)
        await self._run(self._allocate_surface_in_worker)
        return SamplerState.SAMPLING

    async def _sample(self) -> SamplerState:
        timestamps = self._require(self._timestamps, "sample timestamps")
        for index, timestamp in enumerate(timestamps):
            self._cancel_token.raise_if_cancelled()
            frame: Optional[Frame] = await self._run(self._capture_in_worker, index, timestamp)
            if frame is None:
                logger.info(
                    "End of stream at %.2fs: captured %d of %d requested frames",
                    timestamp, len(self._frames), self._frame_count,
                )
                break
            self._frames.append(frame)
            logger.debug("Captured frame %d at %.2fs", index + 1, timestamp)
        return SamplerState.COMPLETED

    def _require(self, value: Optional[_T], what: str) -> _T:
        if value is None:
            raise DecodeError(DecodeFailure.ABORTED, f"{what} unavailable in state {self.state.value}")
        return value

    def _transition(self, next_state: SamplerState) -> None:
        logger.debug("Sampler %s: %s -> %s", self._source.filename, self.state.value, next_state.value)
        self.state = next_state
        if next_state is SamplerState.COMPLETED:
            logger.info("Frame extraction completed: %d frames extracted", len(self._frames))
        elif next_state is SamplerState.FAILED:
            logger.warning("Frame extraction failed for %s: %s", self._source.filename, self._error)
        elif next_state is SamplerState.CANCELLED:
            logger.warning("Frame extraction cancelled for %s", self._source.filename)

    # -- Worker-thread helpers -------------------------------------------------
    # Resources are stored on ``self`` inside the worker so a cancellation that
    # lands mid-call still leaves them visible to the queued teardown.

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, fn, *args)

    def _open_in_worker(self) -> None:
        self._session = self._decoder_call(self._decoder.open, self._source)

    def _allocate_surface_in_worker(self) -> None:
        metadata = self._require(self._metadata, "video metadata")
        self._surface = self._decoder_call(self._renderer.create_surface, metadata.width, metadata.height)

    def _capture_in_worker(self, index: int, timestamp: float) -> Optional[Frame]:
        self._cancel_token.raise_if_cancelled()
        session = self._require(self._session, "decoding session")
        surface = self._require(self._surface, "render surface")
        picture = self._decoder_call(session.seek, timestamp)
        if picture is None:
            return None

        jpeg = self._decoder_call(self._render, surface, picture)
        if not jpeg:
            raise DecodeError(DecodeFailure.DECODE, f"empty JPEG at {timestamp:.2f}s")
        return Frame(
            index=index,
            timestamp=timestamp,
            data=base64.b64encode(jpeg).decode("ascii"),
            width=surface.width,
            height=surface.height,
        )

    def _render(self, surface: RenderSurfacePort, picture: Any) -> bytes:
        surface.draw(picture)
        return surface.encode_jpeg(self._jpeg_quality)

    @staticmethod
    def _decoder_call(fn: Callable[..., Any], *args: Any) -> Any:
        """Invoke a decoder/renderer call, mapping foreign errors to DecodeError."""
        try:
            return fn(*args)
        except VidScribeError:
            raise
        except Exception as exc:
            raise DecodeError(DecodeFailure.DECODE, str(exc)) from exc

    def _release_resources(self) -> None:
        surface, self._surface = self._surface, None
        session, self._session = self._session, None
        if surface is not None:
            try:
                surface.release()
            except Exception as exc:
                logger.error("Failed to release render surface: %s", exc)
        if session is not None:
            try:
                session.release()
            except Exception as exc:
                logger.error("Failed to release decoding session: %s", exc)
        logger.debug("Released resources for %s", self._source.filename)
