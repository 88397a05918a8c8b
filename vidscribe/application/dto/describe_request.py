"""DTO for video description requests."""
from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from typing import Optional
from vidscribe.core.entities.video_source import VideoSource


@dataclass
class DescribeRequest:
    source: VideoSource
    frame_count: Optional[int] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
