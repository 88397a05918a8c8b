"""SampleTimestamps value object: where in a video frames are captured."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SampleTimestamps:
    """N evenly spaced positions strictly inside ``(0, duration)``.

    Position k (1-based) is ``duration / (N + 1) * k``.
    """

    duration_seconds: float
    values: tuple[float, ...]

    @classmethod
    def evenly_spaced(cls, duration_seconds: float, count: int) -> SampleTimestamps:
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        if not math.isfinite(duration_seconds) or duration_seconds <= 0:
            raise ValueError(f"duration must be finite and positive, got {duration_seconds}")

        interval = duration_seconds / (count + 1)
        values: list[float] = []
        for k in range(1, count + 1):
            ts = interval * k
            # Degenerate durations can collapse positions onto 0, each other or the end.
            if ts <= 0 or ts >= duration_seconds:
                continue
            if values and ts <= values[-1]:
                continue
            values.append(ts)
        return cls(duration_seconds=duration_seconds, values=tuple(values))

    @property
    def interval(self) -> float:
        return self.duration_seconds / (len(self.values) + 1) if self.values else 0.0

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]
