"""
Pytest configuration and fixtures for Mailsense tests.

Provides:
- Settings isolated from any local mailsense.yml
- Fresh shared state per test
- Mock DNS backends wrapped in the cached resolver
"""

from unittest.mock import AsyncMock

import pytest

from mailsense.config import AppConfig, Settings
from mailsense.core.state import DomainRegistry, ToolkitState
from mailsense.services.resolvers import CachedResolver
from mailsense.toolkit import EmailToolkit


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a config file that does not exist."""
    return Settings(config_path=str(tmp_path / "missing.yml"))


@pytest.fixture
def app_config(settings) -> AppConfig:
    return AppConfig(settings)


@pytest.fixture
def state() -> ToolkitState:
    """Fresh allow/block lists and an empty DNS cache."""
    return ToolkitState()


@pytest.fixture
def registry(state) -> DomainRegistry:
    return state.domains


@pytest.fixture
def mock_backend():
    """A DNS backend where every domain has both MX and other records."""
    mock = AsyncMock()
    mock.resolver_name = "mock"
    mock.enabled = True
    mock.has_any_record.return_value = True
    mock.has_mx_record.return_value = True
    return mock


@pytest.fixture
def cached_resolver(mock_backend, state) -> CachedResolver:
    return CachedResolver(mock_backend, state.dns_cache, timeout_seconds=1.0)


@pytest.fixture
def toolkit(app_config, state) -> EmailToolkit:
    """Toolkit with DNS disabled."""
    return EmailToolkit(config=app_config, state=state)


@pytest.fixture
def dns_toolkit(app_config, state, cached_resolver) -> EmailToolkit:
    """Toolkit backed by the mock DNS backend."""
    return EmailToolkit(config=app_config, state=state, resolver=cached_resolver)
