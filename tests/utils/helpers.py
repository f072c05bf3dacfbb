"""
Test Helpers
============

Settings tuned for fast, deterministic tests.
"""

from html2png.config.settings import Settings


class TestSettings(Settings):
    """Test-specific settings."""

    __test__ = False

    environment: str = "testing"
    debug: bool = True
    settle_delay_seconds: float = 0.0
    load_timeout_seconds: float = 5.0
    log_level: str = "DEBUG"
