"""
Pytest configuration for Shop Advisor tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import AsyncMock, MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from google.genai import types  # noqa: E402

from shopadvisor.services.catalog_service import load_catalog  # noqa: E402
from shopadvisor.services.response_cache import ResponseCache  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_gemini_response(text: str) -> types.GenerateContentResponse:
    """A real SDK response object carrying text at candidates[0].content.parts[0]."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=text)])
            )
        ]
    )


def make_gemini_client(*results) -> MagicMock:
    """
    Mock genai.Client whose aio.models.generate_content returns (or raises)
    the given results in order.
    """
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=list(results))
    return client


@pytest.fixture
def catalog():
    """The catalog shipped with the package."""
    return load_catalog()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(max_entries=20, ttl_seconds=300, clock=clock)


@pytest.fixture
def gemini_response():
    return make_gemini_response


@pytest.fixture
def gemini_client():
    return make_gemini_client
