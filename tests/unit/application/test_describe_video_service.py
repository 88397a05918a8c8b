"""Tests for DescribeVideoService."""
from __future__ import annotations

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from vidscribe.application.describe_video_service import (
    EXTRACTION_MESSAGE_PREFIX,
    DescribeVideoService,
    to_user_message,
)
from vidscribe.application.dto.describe_request import DescribeRequest
from vidscribe.core.entities.frame import ExtractionResult, Frame
from vidscribe.core.entities.video_description import VideoDescription
from vidscribe.core.exceptions import (
    DecodeError,
    DescriptionParseError,
    DescriptionServiceError,
    ExtractionTimeoutError,
    InvalidArgumentError,
    NoFramesExtractedError,
)
from vidscribe.ports.inbound import DescribeVideoUseCase, ExtractFramesUseCase


def _extraction(n: int, requested: int | None = None) -> ExtractionResult:
    frames = tuple(Frame(index=i, timestamp=float(i + 1), data=f"frame{i}") for i in range(n))
    return ExtractionResult(frames=frames, requested_count=requested or n, duration_seconds=float(n + 1))


@pytest.fixture
def mock_sampler():
    sampler = MagicMock()
    sampler.extract = AsyncMock(return_value=_extraction(5))
    return sampler


@pytest.fixture
def mock_describer(sample_description):
    describer = MagicMock()
    describer.describe = AsyncMock(return_value=sample_description)
    return describer


class TestDescribeVideoService:
    """Tests for the describe pipeline with mocked ports."""

    @pytest.mark.asyncio
    async def test_execute_success(self, mock_sampler, mock_describer, sample_source, sample_description):
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        result = await service.execute(DescribeRequest(source=sample_source))

        assert result.description == sample_description
        assert result.frame_count == 5
        assert result.requested_frame_count == 5
        assert result.timestamps == [1.0, 2.0, 3.0, 4.0, 5.0]
        mock_describer.describe.assert_awaited_once_with(
            ["frame0", "frame1", "frame2", "frame3", "frame4"]
        )

    @pytest.mark.asyncio
    async def test_default_frame_count_used(self, mock_sampler, mock_describer, sample_source):
        service = DescribeVideoService(
            sampler=mock_sampler, describer=mock_describer, default_frame_count=7, max_frame_count=10
        )
        await service.execute(DescribeRequest(source=sample_source))
        args = mock_sampler.extract.await_args.args
        assert args[0] is sample_source
        assert args[1] == 7

    @pytest.mark.asyncio
    async def test_result_to_dict(self, mock_sampler, mock_describer, sample_source):
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        result = await service.execute(DescribeRequest(source=sample_source, request_id="abc123"))
        d = result.to_dict()
        assert d["request_id"] == "abc123"
        assert d["description"]["keyElements"] == ["Brown dog", "Red ball", "Green lawn"]
        assert d["text"].startswith("Summary:\n")
        assert set(d["timings"]) == {"extraction_ms", "description_ms"}

    @pytest.mark.asyncio
    async def test_no_frames_raises(self, mock_sampler, mock_describer, sample_source):
        mock_sampler.extract = AsyncMock(return_value=_extraction(0, requested=5))
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        with pytest.raises(NoFramesExtractedError):
            await service.execute(DescribeRequest(source=sample_source))
        mock_describer.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_extraction_is_described(self, mock_sampler, mock_describer, sample_source):
        mock_sampler.extract = AsyncMock(return_value=_extraction(3, requested=5))
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        result = await service.execute(DescribeRequest(source=sample_source))
        assert result.frame_count == 3
        assert result.requested_frame_count == 5

    @pytest.mark.asyncio
    async def test_extraction_error_propagates(self, mock_sampler, mock_describer, sample_source):
        mock_sampler.extract = AsyncMock(side_effect=DecodeError())
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        with pytest.raises(DecodeError):
            await service.execute(DescribeRequest(source=sample_source))
        mock_describer.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_foreign_describer_error_mapped(self, mock_sampler, mock_describer, sample_source):
        mock_describer.describe = AsyncMock(side_effect=ConnectionError("boom"))
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        with pytest.raises(DescriptionServiceError) as exc_info:
            await service.execute(DescribeRequest(source=sample_source))
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_empty_description_rejected(self, mock_sampler, mock_describer, sample_source):
        mock_describer.describe = AsyncMock(return_value=VideoDescription())
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        with pytest.raises(DescriptionParseError):
            await service.execute(DescribeRequest(source=sample_source))

    @pytest.mark.asyncio
    async def test_missing_describer(self, mock_sampler, sample_source):
        service = DescribeVideoService(sampler=mock_sampler, describer=None)
        with pytest.raises(DescriptionServiceError):
            await service.execute(DescribeRequest(source=sample_source))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("frame_count", [0, -2, 33, True])
    async def test_frame_count_bounds(self, mock_sampler, mock_describer, sample_source, frame_count):
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer, max_frame_count=32)
        with pytest.raises(InvalidArgumentError):
            await service.execute(DescribeRequest(source=sample_source, frame_count=frame_count))
        mock_sampler.extract.assert_not_awaited()


class TestDeadline:
    """The shared deadline covers extraction and description."""

    @pytest.mark.asyncio
    async def test_slow_describer_times_out(self, mock_sampler, sample_source):
        async def slow_describe(frames):
            await asyncio.sleep(1.0)

        describer = MagicMock()
        describer.describe = slow_describe
        service = DescribeVideoService(sampler=mock_sampler, describer=describer, timeout_seconds=0.05)
        with pytest.raises(ExtractionTimeoutError) as exc_info:
            await service.execute(DescribeRequest(source=sample_source))
        assert exc_info.value.timeout_seconds == 0.05

    @pytest.mark.asyncio
    async def test_slow_extraction_times_out_and_releases(
        self, make_sampler, mock_describer, sample_source, ledger, wait_released
    ):
        sampler, decoder = make_sampler(seek_delay=0.05)
        service = DescribeVideoService(sampler=sampler, describer=mock_describer, timeout_seconds=0.12)
        with pytest.raises(ExtractionTimeoutError):
            await service.execute(DescribeRequest(source=sample_source, frame_count=20))

        await wait_released()
        assert ledger.sessions_opened == 1
        assert ledger.balanced
        assert len(decoder.sessions[0].seeks) < 20
        mock_describer.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_extract_frames_uses_same_deadline(self, make_sampler, sample_source, ledger, wait_released):
        sampler, _ = make_sampler(seek_delay=0.05)
        service = DescribeVideoService(sampler=sampler, describer=None, timeout_seconds=0.08)
        with pytest.raises(ExtractionTimeoutError):
            await service.extract_frames(sample_source, 10)
        await wait_released()
        assert ledger.balanced

    @pytest.mark.asyncio
    async def test_extract_frames_with_real_sampler(self, make_sampler, sample_source):
        sampler, _ = make_sampler()
        service = DescribeVideoService(sampler=sampler, describer=None)
        result = await service.extract_frames(sample_source, 3)
        assert len(result) == 3
        assert result.timestamps == pytest.approx([2.5, 5.0, 7.5])


class TestUserMessages:
    def test_known_error(self):
        assert to_user_message(NoFramesExtractedError()) == (
            "Failed to generate description: Could not extract any frames from the video. "
            "The file might be corrupted or in an unsupported format."
        )

    def test_description_error(self):
        assert to_user_message(DescriptionServiceError()) == (
            "Failed to generate description: Failed to get description from the AI model."
        )

    def test_unknown_error(self):
        assert to_user_message(RuntimeError("x")) == (
            "Failed to generate description: An unknown error occurred."
        )

    def test_extraction_prefix(self):
        assert to_user_message(NoFramesExtractedError(), EXTRACTION_MESSAGE_PREFIX).startswith(
            "Failed to extract frames: Could not extract any frames"
        )


class TestPortConformance:
    def test_service_is_describe_use_case(self, mock_sampler, mock_describer):
        service = DescribeVideoService(sampler=mock_sampler, describer=mock_describer)
        assert isinstance(service, DescribeVideoUseCase)

    def test_sampler_is_extract_frames_use_case(self, make_sampler):
        sampler, _ = make_sampler()
        assert isinstance(sampler, ExtractFramesUseCase)
