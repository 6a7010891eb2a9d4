"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

import pytest
from fastapi.testclient import TestClient

from whats_for_dinner.api.dependencies import get_inference_client
from whats_for_dinner.main import app

# 8-byte PNG signature + 2 bytes: a 10-byte "image/png" blob
PNG_10_BYTES = b"\x89PNG\r\n\x1a\n\x00\x01"

IDEAS_MARKDOWN = (
    "## Idea 1: Spinach Frittata\n"
    "A quick *weeknight* dish.\n\n"
    "- 4 eggs\n"
    "- 2 cups spinach\n"
)


class FakeInferenceClient:
    """Records requests and answers with canned text (or raises)."""

    def __init__(self, text=IDEAS_MARKDOWN, error=None):
        self.text = text
        self.error = error
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def png_bytes():
    return PNG_10_BYTES


@pytest.fixture
def fake_inference():
    return FakeInferenceClient()


@pytest.fixture
def client(fake_inference):
    """Create test client with the Gemini adapter replaced by a fake."""
    app.dependency_overrides[get_inference_client] = lambda: fake_inference
    yield TestClient(app)
    app.dependency_overrides.clear()
