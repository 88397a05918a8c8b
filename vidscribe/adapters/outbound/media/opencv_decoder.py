"""OpenCV-based video decoding adapter.

Implements :class:`~vidscribe.ports.outbound.video_decoder_port.VideoDecoderPort`
on top of ``cv2.VideoCapture``. In-memory sources are spooled to a temporary
file for the lifetime of the session, since OpenCV only decodes from paths.
"""
from __future__ import annotations

import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import cv2

from vidscribe.core.entities.video_metadata import VideoMetadata
from vidscribe.core.entities.video_source import VideoSource
from vidscribe.core.exceptions import DecodeError, DecodeFailure

logger = logging.getLogger(__name__)


class OpenCVDecodingSession:
    """One ``cv2.VideoCapture`` bound to one source.

    Satisfies :class:`~vidscribe.ports.outbound.video_decoder_port.DecodingSessionPort`.
    """

    def __init__(self, capture: cv2.VideoCapture, path: str, temp_path: Optional[str] = None) -> None:
        self._capture = capture
        self._path = path
        self._temp_path = temp_path
        self._fps: float = 0.0
        self._frame_count: int = 0
        self._released = False

    def load_metadata(self) -> VideoMetadata:
        self._ensure_open()
        fps = float(self._capture.get(cv2.CAP_PROP_FPS))
        frame_count = int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT))
        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))

        if not math.isfinite(fps) or fps <= 0:
            duration = float("nan")
        elif frame_count < 0:
            # Unbounded stream, no known length.
            duration = float("inf")
        else:
            duration = frame_count / fps

        self._fps = fps
        self._frame_count = frame_count
        logger.debug(
            "Video info - FPS: %.2f, Total frames: %d, Duration: %.2fs",
            fps, frame_count, duration,
        )
        return VideoMetadata(duration_seconds=duration, width=width, height=height, fps=fps)

    def seek(self, timestamp: float) -> Optional[Any]:
        self._ensure_open()
        if self._fps <= 0:
            raise DecodeError(DecodeFailure.DECODE, "seek requested before metadata was loaded")

        target_frame = int(timestamp * self._fps)
        if target_frame >= self._frame_count:
            return None

        self._capture.set(cv2.CAP_PROP_POS_FRAMES, target_frame)
        ret, frame = self._capture.read()
        if not ret or frame is None:
            raise DecodeError(
                DecodeFailure.DECODE,
                f"Failed to read frame at timestamp {timestamp:.2f}s (frame {target_frame})",
            )
        return frame

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            self._capture.release()
        finally:
            if self._temp_path:
                try:
                    os.unlink(self._temp_path)
                except FileNotFoundError:
                    pass
        logger.debug("Released decoding session for %s", self._path)

    @property
    def released(self) -> bool:
        return self._released

    def _ensure_open(self) -> None:
        if self._released:
            raise DecodeError(DecodeFailure.ABORTED, "decoding session already released")


class OpenCVVideoDecoder:
    """Opens :class:`OpenCVDecodingSession` instances.

    Satisfies :class:`~vidscribe.ports.outbound.video_decoder_port.VideoDecoderPort`.
    """

    def __init__(self, temp_dir: Optional[str] = None) -> None:
        self._temp_dir = temp_dir

    def open(self, source: VideoSource) -> OpenCVDecodingSession:
        temp_path: Optional[str] = None
        if source.is_in_memory:
            temp_path = self._spool(source)
            path = temp_path
        else:
            path = str(source.path)
            if not os.path.isfile(path):
                raise DecodeError(DecodeFailure.NETWORK, f"video file not found: {path}")

        capture = cv2.VideoCapture(path)
        if not capture.isOpened():
            capture.release()
            if temp_path:
                os.unlink(temp_path)
            raise DecodeError(DecodeFailure.SRC_NOT_SUPPORTED, f"Cannot open video file: {source.filename}")

        logger.debug("Opened video %s", path)
        return OpenCVDecodingSession(capture, path, temp_path)

    def _spool(self, source: VideoSource) -> str:
        suffix = Path(source.filename).suffix or ".bin"
        if self._temp_dir:
            Path(self._temp_dir).mkdir(parents=True, exist_ok=True)
        try:
            fd, temp_path = tempfile.mkstemp(prefix="vidscribe_", suffix=suffix, dir=self._temp_dir)
            with os.fdopen(fd, "wb") as fh:
                fh.write(source.data or b"")
        except OSError as exc:
            raise DecodeError(DecodeFailure.NETWORK, f"could not spool video data: {exc}") from exc
        return temp_path
