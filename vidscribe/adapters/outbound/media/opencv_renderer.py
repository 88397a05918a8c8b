"""OpenCV/NumPy off-screen render surface used to encode sampled frames as JPEG."""
from __future__ import annotations

import logging
from typing import Any, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class OpenCVRenderSurface:
    """A BGR pixel buffer sized to the video's natural dimensions.

    Satisfies :class:`~vidscribe.ports.outbound.frame_renderer_port.RenderSurfacePort`.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._buffer: Optional[np.ndarray] = np.zeros((height, width, 3), dtype=np.uint8)

    def draw(self, picture: Any) -> None:
        buffer = self._require_buffer()
        image = np.asarray(picture)
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        if image.shape[:2] != (self.height, self.width):
            image = cv2.resize(image, (self.width, self.height), interpolation=cv2.INTER_AREA)
        np.copyto(buffer, image.astype(np.uint8, copy=False))

    def encode_jpeg(self, quality: float) -> bytes:
        buffer = self._require_buffer()
        ok, encoded = cv2.imencode(
            ".jpg",
            buffer,
            [cv2.IMWRITE_JPEG_QUALITY, int(round(quality * 100))],
        )
        if not ok:
            raise RuntimeError("JPEG encoding failed")
        return encoded.tobytes()

    def release(self) -> None:
        self._buffer = None

    @property
    def released(self) -> bool:
        return self._buffer is None

    def _require_buffer(self) -> np.ndarray:
        if self._buffer is None:
            raise RuntimeError("render surface already released")
        return self._buffer


class OpenCVFrameRenderer:
    """Satisfies :class:`~vidscribe.ports.outbound.frame_renderer_port.FrameRendererPort`."""

    def create_surface(self, width: int, height: int) -> OpenCVRenderSurface:
        logger.debug("Allocating %dx%d render surface", width, height)
        return OpenCVRenderSurface(width, height)
