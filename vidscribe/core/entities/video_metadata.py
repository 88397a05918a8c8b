"""Metadata reported by a decoder once a video source has been opened."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class VideoMetadata:
    """Natural duration and picture size of a decoded video."""

    duration_seconds: float
    width: int
    height: int
    fps: float = 0.0

    @property
    def has_valid_duration(self) -> bool:
        return math.isfinite(self.duration_seconds) and self.duration_seconds > 0

    @property
    def has_dimensions(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def resolution_str(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def duration_formatted(self) -> str:
        if not math.isfinite(self.duration_seconds):
            return "unknown"
        minutes = int(self.duration_seconds // 60)
        seconds = int(self.duration_seconds % 60)
        return f"{minutes}:{seconds:02d}"
