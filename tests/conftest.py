"""
Shared pytest fixtures and configuration for restbridge tests.

This module provides:
- Import paths for ``src/`` and the fixture resource namespaces
- Root-logger isolation (the bootstrap replaces root handlers)
- Settings factories that ignore the developer's environment and ``.env``

Fixture namespaces (``tests/fixtures``):
    sample_resources   one resource, one read operation (GET /greetings/{name})
    scoped_resources   request-scoped host bindings (GET /tokens)
    empty_resources    modules without any registered resource
    broken_resources   a module that fails to import
"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

TESTS_DIR = Path(__file__).parent
sys.path.insert(0, str(TESTS_DIR.parent / "src"))
sys.path.insert(0, str(TESTS_DIR / "fixtures"))

from restbridge.core.container import Binding, ServiceContainer, build_service_container  # noqa: E402
from restbridge.core.settings import RestBridgeSettings, get_settings  # noqa: E402


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(TESTS_DIR)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Put the root logger's handlers and level back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Settings / Container Factories
# =============================================================================


@pytest.fixture
def make_settings() -> Callable[..., RestBridgeSettings]:
    """Build settings without reading environment files."""

    def _make(**overrides: Any) -> RestBridgeSettings:
        overrides.setdefault("log_level", "WARNING")
        overrides.setdefault("log_json", True)
        return RestBridgeSettings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def settings(make_settings) -> RestBridgeSettings:
    return make_settings()


@pytest.fixture
def sample_settings(make_settings) -> RestBridgeSettings:
    return make_settings(resource_namespace="sample_resources")


@pytest.fixture
def sample_container(sample_settings) -> ServiceContainer:
    """Default application graph plus the ``Greeter`` used by ``sample_resources``."""
    from sample_resources.services import Greeter

    return build_service_container(
        sample_settings,
        extra=[Binding(Greeter, lambda c: Greeter("Hello"))],
    )
