"""Pytest configuration and fixtures for the test suite."""
from unittest.mock import AsyncMock, Mock

import pytest

from fakes import FakeClusterState


@pytest.fixture
def cluster():
    """Fake cluster with the default API token secret."""
    state = FakeClusterState()
    state.add_secret("default", "api-token", {"token": "secret-token"})
    return state


@pytest.fixture
def betterstack_api():
    """Mock Better Stack client with async services for every resource."""
    api = Mock()
    for service in ("monitors", "heartbeats", "monitor_groups", "heartbeat_groups"):
        setattr(api, service, Mock(
            create=AsyncMock(),
            get=AsyncMock(),
            update=AsyncMock(),
            delete=AsyncMock(return_value=None),
        ))
    return api


@pytest.fixture
def client_factory(betterstack_api):
    """Client factory that records the base URL and token it was asked for."""
    factory = Mock(return_value=betterstack_api)
    return factory

