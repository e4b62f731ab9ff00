"""Integration test fixtures for API testing."""
from __future__ import annotations

import pytest
from httpx import AsyncClient, ASGITransport

from backend.src.adapters.inbound.fastapi_app import app
from backend.src.infrastructure.config import Settings, StorageSettings
from backend.src.infrastructure.container import ApplicationContainer


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with in-memory backends."""
    return Settings(
        app_env="test",
        sink_backend="memory",
        storage=StorageSettings(media_root=str(tmp_path / "media")),
    )


@pytest.fixture
def test_container(test_settings, mock_capturer):
    """Create a test container whose capturer never touches a real decoder."""
    container = ApplicationContainer(test_settings)
    container._cache["capturer"] = mock_capturer
    return container


@pytest.fixture
async def async_client(test_container):
    """Create an async test client for the FastAPI app."""
    app.state.container = test_container

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def upload(async_client):
    """Upload fake video files to the queue."""
    async def _upload(*names: str):
        files = [("files", (name, b"\x00" * 256, "video/mp4")) for name in names]
        return await async_client.post("/api/queue/upload", files=files)
    return _upload
