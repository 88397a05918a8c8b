"""Frame and ExtractionResult entities produced by the frame sampler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class Frame:
    """One JPEG still sampled from a video, carried as base64 text.

    ``data`` has no ``data:image/jpeg;base64,`` prefix.
    """

    index: int
    timestamp: float
    data: str = field(repr=False)
    width: int = 0
    height: int = 0
    mime_type: str = "image/jpeg"

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "timestamp": round(self.timestamp, 3),
            "width": self.width,
            "height": self.height,
            "mime_type": self.mime_type,
            "data": self.data,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Ordered frames from one extraction call."""

    frames: tuple[Frame, ...] = ()
    requested_count: int = 0
    duration_seconds: float = 0.0

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[index]

    @property
    def payloads(self) -> list[str]:
        return [f.data for f in self.frames]

    @property
    def timestamps(self) -> list[float]:
        return [f.timestamp for f in self.frames]

    @property
    def is_empty(self) -> bool:
        return not self.frames

    @property
    def is_partial(self) -> bool:
        return len(self.frames) < self.requested_count
