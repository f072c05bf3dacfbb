"""
Unit Tests for Settings
=======================
"""

import pytest
from pydantic import ValidationError

from html2png.config.settings import DEFAULT_BROWSER_ARGS, Settings, get_settings, reload_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("CHROME_BIN", raising=False)
    settings = Settings(_env_file=None)

    assert settings.port == 3000
    assert settings.chrome_bin is None
    assert settings.browser_args == DEFAULT_BROWSER_ARGS
    assert settings.load_timeout_seconds == 30
    assert settings.settle_delay_seconds == 1.0
    assert settings.max_concurrent_surfaces == 0
    assert settings.max_body_bytes == 10 * 1024 * 1024


def test_port_and_chrome_bin_from_plain_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CHROME_BIN", "/opt/chrome/chrome")
    settings = Settings(_env_file=None)

    assert settings.port == 8080
    assert settings.chrome_bin == "/opt/chrome/chrome"


def test_empty_chrome_bin_is_unset(monkeypatch):
    monkeypatch.setenv("CHROME_BIN", "")
    assert Settings(_env_file=None).chrome_bin is None


def test_prefixed_environment(monkeypatch):
    monkeypatch.setenv("HTML2PNG_SETTLE_DELAY_SECONDS", "0.25")
    monkeypatch.setenv("HTML2PNG_BROWSER_ARGS", '["--no-sandbox", "--disable-gpu"]')
    settings = Settings(_env_file=None)

    assert settings.settle_delay_seconds == 0.25
    assert settings.browser_args == ["--no-sandbox", "--disable-gpu"]


def test_list_from_json_string():
    settings = Settings(_env_file=None, allowed_origins='["https://a.example", "https://b.example"]')
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]


def test_invalid_environment():
    with pytest.raises(ValidationError, match="Environment must be one of"):
        Settings(_env_file=None, environment="staging")


def test_log_level_is_normalized():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


def test_reload_settings_replaces_cached_instance():
    first = get_settings()
    assert get_settings() is first
    second = reload_settings()
    assert second is not first
    assert get_settings() is second


def test_comma_separated_list():
    settings = Settings(_env_file=None, browser_args="--no-sandbox, --disable-gpu")
    assert settings.browser_args == ["--no-sandbox", "--disable-gpu"]
