"""
VidScribe configuration using Pydantic Settings.
Every section can be overridden through environment variables or a .env file.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env before any BaseSettings subclass reads env vars
load_dotenv()


class GeminiSettings(BaseSettings):
    api_key: str = ""
    model: str = "gemini-2.5-flash"
    temperature: float = 0.4

    model_config = {"env_prefix": "GEMINI_"}


class FrameSamplingSettings(BaseSettings):
    frame_count: int = Field(default=5, ge=1)
    max_frame_count: int = Field(default=32, ge=1)
    jpeg_quality: float = Field(default=0.8, gt=0.0, le=1.0)

    model_config = {"env_prefix": "SAMPLING_"}


class PipelineSettings(BaseSettings):
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    model_config = {"env_prefix": "PIPELINE_"}


class WebSettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_size_mb: int = 200
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".mp4", ".mov", ".webm", ".mkv", ".avi", ".m4v"]
    )

    model_config = {"env_prefix": "WEB_"}


class StorageSettings(BaseSettings):
    upload_dir: str = "./media/uploads"

    model_config = {"env_prefix": "STORAGE_"}


class LoggingSettings(BaseSettings):
    level: str = "INFO"

    model_config = {"env_prefix": "LOG_"}


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    app_env: str = "development"
    describer_backend: str = "gemini"

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    sampling: FrameSamplingSettings = Field(default_factory=FrameSamplingSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def validate_production(self) -> None:
        """Validate critical settings for production environment."""
        if self.app_env == "production" and not self.gemini.api_key:
            raise RuntimeError(
                "FATAL: GEMINI_API_KEY must be set in production. "
                "Set the GEMINI_API_KEY environment variable."
            )
        if self.sampling.frame_count > self.sampling.max_frame_count:
            raise RuntimeError(
                f"SAMPLING_FRAME_COUNT ({self.sampling.frame_count}) exceeds "
                f"SAMPLING_MAX_FRAME_COUNT ({self.sampling.max_frame_count})"
            )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
