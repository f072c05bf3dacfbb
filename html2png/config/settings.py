"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, List, Union
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


DEFAULT_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="HTML to PNG Converter", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3000,
        description="Server port",
        validation_alias=AliasChoices("port", "PORT", "HTML2PNG_PORT"),
    )
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum accepted request body size"
    )

    # Browser Configuration
    chrome_bin: Optional[str] = Field(
        default=None,
        description="Chromium executable, defaults to the Playwright managed build",
        validation_alias=AliasChoices("chrome_bin", "CHROME_BIN", "HTML2PNG_CHROME_BIN"),
    )
    headless: bool = Field(default=True, description="Run browser in headless mode")
    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS),
        description="Command line flags passed to the browser at launch",
    )

    # Rendering Configuration
    load_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Upper bound on waiting for content to load"
    )
    settle_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Fixed wait after load so deferred scripts can finish before capture",
    )
    max_concurrent_surfaces: int = Field(
        default=0, ge=0, description="Maximum in-flight render surfaces, 0 means unbounded"
    )

    # API Documentation Configuration
    enable_docs: bool = Field(default=False, description="Enable FastAPI docs endpoints")

    # Security Configuration
    allowed_origins: List[str] = Field(default=["*"], description="Allowed origins for CORS")

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_origins", "browser_args", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse a list from a JSON array string or a comma separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("chrome_bin")
    @classmethod
    def empty_chrome_bin_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def load_timeout_ms(self) -> float:
        return self.load_timeout_seconds * 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="HTML2PNG_",
        populate_by_name=True,
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
