"""Port for the AI service that turns sampled frames into a description."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable
if TYPE_CHECKING:
    from vidscribe.core.entities.video_description import VideoDescription


@runtime_checkable
class VideoDescriberPort(Protocol):
    async def describe(self, frames: Sequence[str]) -> VideoDescription: ...
    def test_connection(self) -> bool: ...
