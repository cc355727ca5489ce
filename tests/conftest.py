"""Pytest configuration and shared fixtures for the Bento MCP server tests.

The dispatcher is exercised against an AsyncMock standing in for
BentoClient, so no test touches the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.client import BentoClient
from core.config import BentoSettings
from core.dispatcher import ToolDispatcher


@pytest.fixture
def test_settings():
    """Settings with all three credentials present."""
    return BentoSettings(
        publishable_key="pk_test",
        secret_key="sk_test",
        site_uuid="site-123",
        api_base_url="https://bento.test/api/v1",
    )


@pytest.fixture
def empty_settings():
    """Settings with no credentials at all."""
    return BentoSettings()


@pytest.fixture
def mock_client():
    """An AsyncMock with BentoClient's method surface."""
    return AsyncMock(spec=BentoClient)


@pytest.fixture
def client_factory(mock_client):
    """A factory that always hands back ``mock_client`` and records its calls."""
    return MagicMock(return_value=mock_client)


@pytest.fixture
def dispatcher(test_settings, client_factory):
    return ToolDispatcher(test_settings, client_factory=client_factory)
