"""DTO for video description results."""
from __future__ import annotations
from dataclasses import dataclass, field
from vidscribe.core.entities.video_description import VideoDescription


@dataclass
class DescribeResult:
    request_id: str
    description: VideoDescription
    frame_count: int = 0
    requested_frame_count: int = 0
    timestamps: list = field(default_factory=list)
    duration_seconds: float = 0.0
    extraction_ms: float = 0.0
    description_ms: float = 0.0

    @property
    def text(self) -> str:
        return self.description.to_plain_text()

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "description": self.description.to_dict(),
            "text": self.text,
            "frame_count": self.frame_count,
            "requested_frame_count": self.requested_frame_count,
            "timestamps": [round(t, 3) for t in self.timestamps],
            "duration_seconds": round(self.duration_seconds, 3),
            "timings": {
                "extraction_ms": round(self.extraction_ms, 1),
                "description_ms": round(self.description_ms, 1),
            },
        }
