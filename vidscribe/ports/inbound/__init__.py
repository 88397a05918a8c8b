from vidscribe.ports.inbound.describe_video_use_case import DescribeVideoUseCase
from vidscribe.ports.inbound.extract_frames_use_case import ExtractFramesUseCase

__all__ = [
    "DescribeVideoUseCase",
    "ExtractFramesUseCase",
]
