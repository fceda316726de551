"""Shared fixtures."""

import pytest
from loguru import logger

from amqp_tools import config


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Keep environment settings and log sinks from leaking between tests."""
    for name in ("AMQP_TOOLS_LOG_LEVEL", "AMQP_TOOLS_LOG_FORMAT", "AMQP_TOOLS_CONNECTION_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
    logger.remove()


@pytest.fixture
def app_dir(tmp_path, monkeypatch):
    """Point the user config directory at a temporary location."""
    directory = tmp_path / "config" / "amqp-tools"
    monkeypatch.setattr(config.click, "get_app_dir", lambda name: str(directory))
    return directory


@pytest.fixture
def write_profiles(app_dir):
    """Write TOML text to the profile file and return its path."""

    def _write(text: str):
        app_dir.mkdir(parents=True, exist_ok=True)
        path = app_dir / "config.toml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
