"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and shared test
doubles. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from tests.helpers import RecordingBuilder
from tryresult import create_executor
from tryresult.config import get_settings

# =============================================================================
# Test Doubles
# =============================================================================


@pytest.fixture
def builder() -> RecordingBuilder:
    """A fresh RecordingBuilder (not autouse)."""
    return RecordingBuilder()


@pytest.fixture
def execute(builder: RecordingBuilder):
    """An Executor bound to the ``builder`` fixture (not autouse)."""
    return create_executor(builder)


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_settings_env(request, monkeypatch):
    """Ensure a clean TRYRESULT_* environment and an empty settings cache.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if not request.node.get_closest_marker("allow_env_pollution"):
        for key in list(os.environ.keys()):
            if key.startswith("TRYRESULT_"):
                monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def debug_library_logging():
    """Let caplog see the library's debug records."""
    logging.getLogger("tryresult").setLevel(logging.DEBUG)
