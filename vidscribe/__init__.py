"""VidScribe: sample frames from an uploaded video and describe them with an AI model."""

__version__ = "0.1.0"
