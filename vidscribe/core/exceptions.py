"""Custom exception hierarchy for VidScribe."""
from __future__ import annotations

from enum import Enum


class VidScribeError(Exception):
    """Base exception for all VidScribe errors."""

    code: str = "error"
    default_message: str = "An unknown error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EmptyInputError(VidScribeError):
    """Raised when the submitted video contains no bytes."""

    code = "empty_input"
    default_message = "The uploaded video is empty."


class InvalidArgumentError(VidScribeError, ValueError):
    """Raised when a caller passes an unusable argument (e.g. frame count)."""

    code = "invalid_argument"
    default_message = "Invalid argument."


class UploadValidationError(VidScribeError):
    """Raised when an uploaded file fails validation."""

    code = "invalid_upload"
    default_message = "Please upload a valid video file."


class DecodeFailure(str, Enum):
    """Why the decoder gave up on a source."""

    ABORTED = "aborted"
    NETWORK = "network"
    DECODE = "decode"
    SRC_NOT_SUPPORTED = "src_not_supported"


_DECODE_MESSAGES = {
    DecodeFailure.ABORTED: "Loading the video was aborted.",
    DecodeFailure.NETWORK: "The video data could not be read.",
    DecodeFailure.DECODE: "Error loading video file. It may be corrupt or in an unsupported format.",
    DecodeFailure.SRC_NOT_SUPPORTED: "Error loading video file. It may be corrupt or in an unsupported format.",
}


class DecodeError(VidScribeError):
    """Raised when the decoder reports an error for the source."""

    def __init__(
        self,
        failure: DecodeFailure = DecodeFailure.DECODE,
        detail: str = "",
        message: str | None = None,
    ) -> None:
        self.failure = failure
        self.detail = detail
        super().__init__(message or _DECODE_MESSAGES[failure])

    @property
    def code(self) -> str:  # type: ignore[override]
        return f"decode_{self.failure.value}"


class MetadataUnavailableError(DecodeError):
    """Raised when the decoder opens the source but reports no usable metadata."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            DecodeFailure.DECODE,
            detail,
            message="Could not read video metadata. The file may be corrupt or in an unsupported format.",
        )

    @property
    def code(self) -> str:  # type: ignore[override]
        return "metadata_unavailable"


class InvalidDurationError(VidScribeError):
    """Raised when the video duration is zero or not finite."""

    code = "invalid_duration"
    default_message = "Video has no duration or is invalid."


class NoFramesExtractedError(VidScribeError):
    """Raised by callers when an extraction resolved with zero frames."""

    code = "no_frames_extracted"
    default_message = (
        "Could not extract any frames from the video. "
        "The file might be corrupted or in an unsupported format."
    )


class ExtractionCancelledError(VidScribeError):
    """Raised when an extraction stops because its cancellation token was set."""

    code = "cancelled"
    default_message = "Frame extraction was cancelled."


class ExtractionTimeoutError(VidScribeError):
    """Raised when extraction plus description exceed the pipeline deadline."""

    code = "timeout"

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"The request timed out after {timeout_seconds:g} seconds.")


class DescriptionServiceError(VidScribeError):
    """Raised when the AI description service call fails."""

    code = "description_failed"
    default_message = "Failed to get description from the AI model."


class DescriptionParseError(DescriptionServiceError):
    """Raised when the AI reply is not the expected JSON object."""

    code = "description_unparseable"
    default_message = "The AI model returned a description that could not be parsed."
