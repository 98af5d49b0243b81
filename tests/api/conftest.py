"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from config import Settings
    from core.crop_store import CropStore
    from main import app

    crop_store = CropStore(max_size=100)

    # Test config, independent of the environment
    test_config = Settings().to_dict()
    test_config["image"]["max_payload_mb"] = 2

    app.state.crop_store = crop_store
    app.state.config = test_config

    # Create test client (no context manager to skip the lifespan handler)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    crop_store.clear()


@pytest.fixture
def crop_request(png_base64):
    """Valid crop request body for the 600x600 test image"""
    return {
        "image_base64": png_base64,
        "region": {"x0": 50, "y0": 50, "x1": 550, "y1": 550},
    }
