"""Inbound port for frame extraction without description."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from vidscribe.core.entities.frame import ExtractionResult
    from vidscribe.core.entities.video_source import VideoSource
    from vidscribe.core.value_objects.cancellation import CancellationToken


@runtime_checkable
class ExtractFramesUseCase(Protocol):
    async def extract(
        self,
        source: VideoSource,
        frame_count: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ExtractionResult: ...
