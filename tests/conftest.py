"""Pytest configuration and shared fixtures."""
import pytest

from eventhub.config import DispatcherConfig
from eventhub.events import EventDispatcher, reset_event_bus


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def _fresh_event_bus(monkeypatch):
    """Every test starts without a global dispatcher or EVENTHUB_* overrides."""
    monkeypatch.delenv("EVENTHUB_SEPARATOR", raising=False)
    monkeypatch.delenv("EVENTHUB_HISTORY_SIZE", raising=False)
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def errors():
    """Collects (event_name, error) pairs reported by a dispatcher."""
    return []


@pytest.fixture
def dispatcher(errors):
    config = DispatcherConfig(
        history_size=100,
        error_sink=lambda event_name, error: errors.append((event_name, error)),
    )
    return EventDispatcher(config)
