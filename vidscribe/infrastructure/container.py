"""
Dependency injection container.
Wires together ports and adapters based on configuration.
"""
from __future__ import annotations

import logging
from typing import Optional

from vidscribe.infrastructure.config import Settings

logger = logging.getLogger(__name__)


class ApplicationContainer:
    """Simplified container that builds concrete instances from settings.

    Usage::

        container = ApplicationContainer(settings)
        service = container.describe_video_service()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._cache: dict[str, object] = {}

    def _get_or_create(self, key: str, factory):
        if key not in self._cache:
            self._cache[key] = factory(self.settings)
        return self._cache[key]

    def override(self, key: str, instance: object) -> None:
        """Replace a component (e.g. ``"describer"``) with a pre-built instance."""
        self._cache[key] = instance

    # ── Lazy factory helpers ──────────────────────────────────────

    @staticmethod
    def _build_video_decoder(settings: Settings):
        from vidscribe.adapters.outbound.media.opencv_decoder import OpenCVVideoDecoder
        return OpenCVVideoDecoder(temp_dir=settings.storage.upload_dir)

    @staticmethod
    def _build_frame_renderer(settings: Settings):
        from vidscribe.adapters.outbound.media.opencv_renderer import OpenCVFrameRenderer
        return OpenCVFrameRenderer()

    @staticmethod
    def _build_describer(settings: Settings):
        if settings.describer_backend == "gemini":
            from vidscribe.adapters.outbound.ai.gemini_describer import GeminiVideoDescriber
            return GeminiVideoDescriber(
                api_key=settings.gemini.api_key,
                model=settings.gemini.model,
                temperature=settings.gemini.temperature,
            )
        raise ValueError(f"Unknown describer backend: {settings.describer_backend!r}")

    # ── Port accessors ─────────────────────────────────────────────

    def video_decoder(self):
        return self._get_or_create("video_decoder", self._build_video_decoder)

    def frame_renderer(self):
        return self._get_or_create("frame_renderer", self._build_frame_renderer)

    def describer(self):
        return self._get_or_create("describer", self._build_describer)

    # ── Application services ───────────────────────────────────────

    def frame_sampler(self):
        def _build(settings: Settings):
            from vidscribe.core.services.frame_sampler import FrameSampler
            return FrameSampler(
                decoder=self.video_decoder(),
                renderer=self.frame_renderer(),
                jpeg_quality=settings.sampling.jpeg_quality,
            )
        return self._get_or_create("frame_sampler", _build)

    def extraction_service(self):
        from vidscribe.application.describe_video_service import DescribeVideoService
        return DescribeVideoService(
            sampler=self.frame_sampler(),
            describer=None,
            timeout_seconds=self.settings.pipeline.timeout_seconds,
            default_frame_count=self.settings.sampling.frame_count,
            max_frame_count=self.settings.sampling.max_frame_count,
        )

    def describe_video_service(self):
        from vidscribe.application.describe_video_service import DescribeVideoService
        return DescribeVideoService(
            sampler=self.frame_sampler(),
            describer=self.describer(),
            timeout_seconds=self.settings.pipeline.timeout_seconds,
            default_frame_count=self.settings.sampling.frame_count,
            max_frame_count=self.settings.sampling.max_frame_count,
        )
