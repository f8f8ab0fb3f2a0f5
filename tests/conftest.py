"""
Pytest configuration and fixtures for Fauna client tests.
"""

from __future__ import annotations

import logging
import os
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from fauna import client
from fauna.config import Settings, clear_settings_cache, get_settings
from fauna.connection import Connection
from fauna.types import Response


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "FAUNA_SECRET": "test-secret-0123456789",
        "FAUNA_DOMAIN": "db.example.test",
        "FAUNA_SCHEME": "https",
        "FAUNA_API_VERSION": "v1",
        "FAUNA_TIMEOUT": "5",
        "FAUNA_MAX_RETRIES": "2",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        os.environ.pop("FAUNA_PORT", None)
        clear_settings_cache()
        yield env_vars
        clear_settings_cache()


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Settings:
    """Provide a Settings instance with mock configuration."""
    return get_settings()


@pytest.fixture
def transport() -> MagicMock:
    """A transport double whose calls all return an empty response."""
    mock = MagicMock(spec=Connection)
    mock.domain = "db.example.test"
    for name in ("get", "post", "put", "patch", "post_transaction"):
        getattr(mock, name).return_value = Response()
    mock.delete.return_value = None
    return mock


@pytest.fixture(autouse=True)
def clean_context_stack() -> Generator[None, None, None]:
    """Start and finish every test with an empty context stack."""
    client.reset_context()
    yield
    client.reset_context()


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo any logging configuration a test (or the CLI) installs."""
    loggers = [logging.getLogger(name) for name in ("fauna", "httpx", "httpcore")]
    saved = [(lg, lg.level, list(lg.handlers), lg.propagate) for lg in loggers]
    yield
    for lg, level, handlers, propagate in saved:
        lg.setLevel(level)
        lg.handlers[:] = handlers
        lg.propagate = propagate
