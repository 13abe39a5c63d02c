"""Test configuration and fixtures."""

import os
from collections.abc import AsyncGenerator

# Must be set before Settings() is loaded.
os.environ.setdefault("YT_API_KEY", "test-api-key")

import pytest
from httpx import ASGITransport, AsyncClient

from src.cache.memory import MemoryCache
from src.config import Settings
from src.context import ServerContext
from src.main import create_app
from src.middleware import FixedWindowRateLimiter
from tests.factories import FakeYouTubeClient


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings() -> Settings:
    return Settings(yt_api_key="test-api-key", redis_url=None, default_allowed_channels=[])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(timer=clock)


@pytest.fixture
def fake_client() -> FakeYouTubeClient:
    return FakeYouTubeClient()


@pytest.fixture
def server_context(
    test_settings: Settings, fake_client: FakeYouTubeClient, memory_cache: MemoryCache
) -> ServerContext:
    return ServerContext(
        settings=test_settings,
        client=fake_client,
        cache=memory_cache,
        rate_limiter=FixedWindowRateLimiter(
            test_settings.rate_limit_max_requests, test_settings.rate_limit_window_seconds
        ),
    )


@pytest.fixture
async def client(server_context: ServerContext) -> AsyncGenerator[AsyncClient, None]:
    """Create test client over an app wired to the fake upstream and memory cache."""
    app = create_app(server_context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
