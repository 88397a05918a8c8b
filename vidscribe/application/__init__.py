from vidscribe.application.describe_video_service import DescribeVideoService, to_user_message

__all__ = [
    "DescribeVideoService",
    "to_user_message",
]
