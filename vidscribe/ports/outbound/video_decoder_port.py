"""Port for opening video sources and driving a decoding session."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from vidscribe.core.entities.video_metadata import VideoMetadata
    from vidscribe.core.entities.video_source import VideoSource


@runtime_checkable
class DecodingSessionPort(Protocol):
    """One live decoder bound to one source. Calls are blocking and never concurrent.

    ``seek`` returns the decoded picture at the position, or ``None`` once the
    position lies past the last decodable frame.
    """

    def load_metadata(self) -> VideoMetadata: ...
    def seek(self, timestamp: float) -> Optional[Any]: ...
    def release(self) -> None: ...


@runtime_checkable
class VideoDecoderPort(Protocol):
    def open(self, source: VideoSource) -> DecodingSessionPort: ...
