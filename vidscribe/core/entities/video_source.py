"""VideoSource entity: the caller-owned handle to uploaded video data."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class VideoSource:
    """Binary video data, backed either by a file on disk or by bytes in memory.

    Exactly one of ``path`` and ``data`` must be set.
    """

    path: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)
    filename: str = ""
    mime_type: str = ""

    def __post_init__(self) -> None:
        if (self.path is None) == (self.data is None):
            raise ValueError("VideoSource needs exactly one of 'path' or 'data'")
        if not self.filename:
            name = Path(self.path).name if self.path else "video"
            object.__setattr__(self, "filename", name)

    @classmethod
    def from_path(cls, path: str | os.PathLike, mime_type: str = "") -> VideoSource:
        return cls(path=os.fspath(path), mime_type=mime_type)

    @classmethod
    def from_bytes(cls, data: bytes, filename: str = "video", mime_type: str = "") -> VideoSource:
        return cls(data=bytes(data), filename=filename, mime_type=mime_type)

    @property
    def size_bytes(self) -> int:
        if self.data is not None:
            return len(self.data)
        try:
            return os.path.getsize(self.path)  # type: ignore[arg-type]
        except OSError:
            return 0

    @property
    def exists(self) -> bool:
        return self.data is not None or os.path.isfile(self.path)  # type: ignore[arg-type]

    @property
    def is_empty(self) -> bool:
        """Zero bytes of video. A missing file is not empty; the decoder reports it."""
        return self.exists and self.size_bytes == 0

    @property
    def is_in_memory(self) -> bool:
        return self.data is not None
