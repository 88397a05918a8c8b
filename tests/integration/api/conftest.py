"""Integration test fixtures for API testing."""
from __future__ import annotations

import pytest
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock, MagicMock

from vidscribe.adapters.inbound.fastapi_app import app
from vidscribe.infrastructure.config import GeminiSettings, PipelineSettings, Settings
from vidscribe.infrastructure.container import ApplicationContainer


@pytest.fixture
def test_settings(tmp_path):
    """Test settings with no AI key and a throwaway upload directory."""
    settings = Settings(
        app_env="test",
        gemini=GeminiSettings(api_key=""),
        pipeline=PipelineSettings(timeout_seconds=5.0),
    )
    settings.storage.upload_dir = str(tmp_path / "uploads")
    return settings


@pytest.fixture
def mock_describer(sample_description):
    describer = MagicMock()
    describer.describe = AsyncMock(return_value=sample_description)
    return describer


@pytest.fixture
def test_container(test_settings, mock_describer):
    """Container with the AI describer replaced by a mock."""
    container = ApplicationContainer(test_settings)
    container.override("describer", mock_describer)
    return container


@pytest.fixture
async def async_client(test_container):
    """Create an async test client for the FastAPI app."""
    app.state.container = test_container

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
