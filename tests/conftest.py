"""Pytest configuration for async testing.

This configuration ensures:
1. Async tests are marked for pytest-asyncio
2. Container singletons never leak between tests
3. Shared doubles (logger, event bus) are built the same way everywhere
"""

import inspect
from unittest.mock import MagicMock

import pytest

import src.core.container as container
from src.core.config import get_settings
from src.domain.events.base_event import DomainEvent
from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

pytest_plugins = ("pytest_asyncio",)


class RecordingEventBus(InMemoryEventBus):
    """InMemoryEventBus that also keeps every published event, in order."""

    def __init__(self, logger) -> None:
        super().__init__(logger=logger)
        self.published: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.published.append(event)
        await super().publish(event)

    def types(self) -> list[str]:
        return [event.event_type for event in self.published]


@pytest.fixture(autouse=True)
def reset_container_singletons():
    """Clear every lru_cache singleton after each test."""
    yield
    get_settings.cache_clear()
    for name in container.__all__:
        getattr(container, name).cache_clear()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double implementing LoggerProtocol by duck typing."""
    return MagicMock()


@pytest.fixture
def event_bus(mock_logger: MagicMock) -> RecordingEventBus:
    return RecordingEventBus(logger=mock_logger)


@pytest.fixture
def no_sleep():
    """Awaitable sleep double recording requested delays (seconds)."""
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    sleep.delays = delays  # type: ignore[attr-defined]
    return sleep


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Tests against mocked external HTTP APIs"
    )
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        function = getattr(item, "function", None)
        if function is not None and inspect.iscoroutinefunction(function):
            item.add_marker(pytest.mark.asyncio)
