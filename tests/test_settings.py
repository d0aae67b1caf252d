"""
Tests for configuration and logging setup

Run with: python -m pytest tests/test_settings.py -v
"""

import logging

import pytest

from keyed_state.config.logging import setup_logging
from keyed_state.config.settings import Settings, settings
from keyed_state.store.state_store import KeyedStateStore


class TestSettings:
    """Test the Settings defaults and store overrides."""

    def test_defaults(self):
        config = Settings()
        assert config.SUBSCRIPTION_BUFFER_SIZE >= 0
        assert isinstance(config.THREAD_SAFE, bool)
        assert isinstance(config.LOG_LEVEL, str)

    def test_store_uses_settings(self, monkeypatch):
        """Test the store falls back to settings when no argument is given."""
        monkeypatch.setattr(settings, "SUBSCRIPTION_BUFFER_SIZE", 7)
        store = KeyedStateStore()
        assert store.bus.buffer_size == 7

    def test_argument_overrides_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "SUBSCRIPTION_BUFFER_SIZE", 7)
        store = KeyedStateStore(buffer_size=2)
        assert store.bus.buffer_size == 2

    def test_negative_setting_rejected(self, monkeypatch):
        """Test a negative buffer size from settings is refused at construction."""
        monkeypatch.setattr(settings, "SUBSCRIPTION_BUFFER_SIZE", -1)
        with pytest.raises(ValueError):
            KeyedStateStore()


class TestSetupLogging:
    """Test setup_logging()."""

    def test_debug_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        setup_logging(debug=True)

        assert calls["level"] == logging.DEBUG

    def test_named_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        setup_logging(debug=False, level="warning")

        assert calls["level"] == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        setup_logging(debug=False, level="chatty")

        assert calls["level"] == logging.INFO
