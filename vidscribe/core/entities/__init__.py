from vidscribe.core.entities.frame import ExtractionResult, Frame
from vidscribe.core.entities.video_description import VideoDescription
from vidscribe.core.entities.video_metadata import VideoMetadata
from vidscribe.core.entities.video_source import VideoSource

__all__ = [
    "ExtractionResult", "Frame", "VideoDescription", "VideoMetadata", "VideoSource",
]
