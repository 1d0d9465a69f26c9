"""
Root conftest.py for shared test fixtures and configuration.
This file provides common fixtures used across the test suite.
"""

import sys
from pathlib import Path

import pytest
from loguru import logger

# Add project root to Python path for consistent imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from chat_pickers import config as picker_config


# ========== Test Environment Isolation ==========

@pytest.fixture(autouse=True)
def isolate_test_environment(monkeypatch, tmp_path):
    """Automatically isolate the test environment from the user's configuration.

    This fixture:
    - Points the config loader at a non-existent file in the test's temp directory
    - Clears the cached configuration before and after the test
    - Removes API key and log level overrides from the environment
    """
    monkeypatch.setenv(picker_config.CONFIG_PATH_ENV_VAR, str(tmp_path / "config.toml"))
    monkeypatch.delenv("TENOR_API_KEY", raising=False)
    monkeypatch.delenv("CHAT_PICKERS_LOG_LEVEL", raising=False)
    monkeypatch.setattr(picker_config, "_CONFIG_CACHE", None)
    yield
    picker_config._CONFIG_CACHE = None


@pytest.fixture
def write_config(tmp_path):
    """Write a user config file at the isolated location and drop the cache."""
    def _write(content):
        path = tmp_path / "config.toml"
        path.write_text(content, encoding="utf-8")
        picker_config._CONFIG_CACHE = None
        return path
    return _write


@pytest.fixture
def restore_logger():
    """Put loguru back to its default stderr sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr)


# ========== Test Markers ==========

def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line("markers", "unit: Unit tests that don't require external resources")
    config.addinivalue_line("markers", "ui: Textual UI tests driven through App.run_test")
    config.addinivalue_line("markers", "property: Property-based tests using hypothesis")
