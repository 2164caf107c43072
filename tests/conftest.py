"""
Shared test fixtures and configuration.

Settings are cached process-wide; tests that change the environment must
not leak a stale Settings instance into other tests.
"""

from collections.abc import Generator

import pytest

from src.config.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Clear the cached Settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
