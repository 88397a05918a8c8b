"""Shared test fixtures for all tests."""
from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional

import pytest

from vidscribe.core.entities.video_description import VideoDescription
from vidscribe.core.entities.video_metadata import VideoMetadata
from vidscribe.core.entities.video_source import VideoSource
from vidscribe.core.exceptions import DecodeError, DecodeFailure
from vidscribe.core.services.frame_sampler import FrameSampler


# ── In-memory media fakes ──────────────────────────────────────────────────

class ResourceLedger:
    """Counts every decoder session and render surface acquired and released."""

    def __init__(self) -> None:
        self.sessions_opened = 0
        self.sessions_released = 0
        self.surfaces_created = 0
        self.surfaces_released = 0

    @property
    def balanced(self) -> bool:
        return (
            self.sessions_opened == self.sessions_released
            and self.surfaces_created == self.surfaces_released
        )


class FakeDecodingSession:
    """Session whose "pictures" are simply the timestamps that were seeked to."""

    def __init__(
        self,
        ledger: ResourceLedger,
        metadata: VideoMetadata,
        fail_at: Optional[int] = None,
        fail_with: Optional[BaseException] = None,
        end_after: Optional[int] = None,
        seek_delay: float = 0.0,
        metadata_error: Optional[BaseException] = None,
        on_seek: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.ledger = ledger
        self.metadata = metadata
        self.fail_at = fail_at
        self.fail_with = fail_with
        self.end_after = end_after
        self.seek_delay = seek_delay
        self.metadata_error = metadata_error
        self.on_seek = on_seek
        self.seeks: list[float] = []
        self.release_calls = 0

    def load_metadata(self) -> VideoMetadata:
        if self.metadata_error is not None:
            raise self.metadata_error
        return self.metadata

    def seek(self, timestamp: float) -> Optional[Any]:
        if self.seek_delay:
            time.sleep(self.seek_delay)
        index = len(self.seeks)
        self.seeks.append(timestamp)
        if self.on_seek is not None:
            self.on_seek(index)
        if self.fail_at is not None and index == self.fail_at:
            raise self.fail_with or DecodeError(DecodeFailure.DECODE, f"corrupt packet at seek {index}")
        if self.end_after is not None and index >= self.end_after:
            return None
        return timestamp

    def release(self) -> None:
        self.release_calls += 1
        self.ledger.sessions_released += 1


class FakeVideoDecoder:
    def __init__(self, ledger: ResourceLedger, open_error: Optional[BaseException] = None, **session_kwargs) -> None:
        self.ledger = ledger
        self.open_error = open_error
        self.session_kwargs = session_kwargs
        self.sessions: list[FakeDecodingSession] = []

    def open(self, source: VideoSource) -> FakeDecodingSession:
        if self.open_error is not None:
            raise self.open_error
        self.ledger.sessions_opened += 1
        session = FakeDecodingSession(self.ledger, **self.session_kwargs)
        self.sessions.append(session)
        return session


class FakeRenderSurface:
    def __init__(
        self,
        ledger: ResourceLedger,
        width: int,
        height: int,
        draw_error: Optional[BaseException] = None,
        encode_error: Optional[BaseException] = None,
        encode_result: Optional[bytes] = None,
    ) -> None:
        self.ledger = ledger
        self.width = width
        self.height = height
        self.draw_error = draw_error
        self.encode_error = encode_error
        self.encode_result = encode_result
        self._picture: Any = None

    def draw(self, picture: Any) -> None:
        if self.draw_error is not None:
            raise self.draw_error
        self._picture = picture

    def encode_jpeg(self, quality: float) -> bytes:
        if self.encode_error is not None:
            raise self.encode_error
        if self.encode_result is not None:
            return self.encode_result
        return f"jpeg@{self._picture:.3f}q{quality}".encode("ascii")

    def release(self) -> None:
        self.ledger.surfaces_released += 1


class FakeFrameRenderer:
    def __init__(self, ledger: ResourceLedger, **surface_kwargs) -> None:
        self.ledger = ledger
        self.surface_kwargs = surface_kwargs
        self.surfaces: list[FakeRenderSurface] = []

    def create_surface(self, width: int, height: int) -> FakeRenderSurface:
        self.ledger.surfaces_created += 1
        surface = FakeRenderSurface(self.ledger, width, height, **self.surface_kwargs)
        self.surfaces.append(surface)
        return surface


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture
def ledger() -> ResourceLedger:
    return ResourceLedger()


@pytest.fixture
def wait_released(ledger):
    """Teardown abandoned by a cancelled task finishes on the worker thread; poll for it."""

    async def _wait(timeout: float = 2.0) -> None:
        deadline = time.monotonic() + timeout
        while not ledger.balanced and time.monotonic() < deadline:
            await asyncio.sleep(0.01)

    return _wait


@pytest.fixture
def ten_second_metadata() -> VideoMetadata:
    return VideoMetadata(duration_seconds=10.0, width=640, height=360, fps=30.0)


@pytest.fixture
def make_sampler(ledger, ten_second_metadata):
    """Factory returning ``(sampler, decoder)`` backed by the in-memory fakes."""

    def _make(
        metadata: Optional[VideoMetadata] = None,
        open_error=None,
        jpeg_quality: float = 0.8,
        surface_kwargs: Optional[dict] = None,
        **kwargs,
    ):
        decoder = FakeVideoDecoder(
            ledger,
            open_error=open_error,
            metadata=metadata or ten_second_metadata,
            **kwargs,
        )
        renderer = FakeFrameRenderer(ledger, **(surface_kwargs or {}))
        return FrameSampler(decoder=decoder, renderer=renderer, jpeg_quality=jpeg_quality), decoder

    return _make


@pytest.fixture
def sample_source() -> VideoSource:
    return VideoSource.from_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 1024, "clip.mp4", "video/mp4")


@pytest.fixture
def empty_source() -> VideoSource:
    return VideoSource.from_bytes(b"", "empty.mp4", "video/mp4")


@pytest.fixture
def sample_description() -> VideoDescription:
    return VideoDescription(
        summary="A dog chases a ball across a park.",
        setting="A sunny public park in the afternoon.",
        key_elements=["Brown dog", "Red ball", "Green lawn"],
        sequence_of_events=[
            "A ball is thrown across the lawn.",
            "The dog sprints after it.",
            "The dog returns the ball.",
        ],
    )
