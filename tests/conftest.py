"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone

from url_registry.lib.registry import LinkRegistry
from url_registry.lib.shortcode import ShortCodeGenerator
from url_registry.lib.storage.memory import MemoryLinkStore
from url_registry.lib.common.logging_config import setup_logging


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    """Create controllable clock."""
    return FakeClock()


@pytest.fixture
def store():
    """Create in-memory link store."""
    return MemoryLinkStore()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=5)


@pytest.fixture
def registry(store, short_code_generator, logger, clock) -> LinkRegistry:
    """Create registry backed by the in-memory store."""
    return LinkRegistry(
        store=store,
        base_url="https://sho.rt",
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
