"""Client configuration using Pydantic Settings.

Configuration is environment-aware:
- REGISTRY_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
REGISTRY_ENV = os.getenv("REGISTRY_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(REGISTRY_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (deployments may inject env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_BASE_URL = "https://crates.io/api/v1/"


def _build_registry_settings() -> "RegistrySettings":
    """Build registry settings from environment.

    Pydantic Settings (v2) populates values from environment variables, which
    static type checkers do not model for BaseSettings constructors.
    """

    return RegistrySettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build log settings from environment."""

    return LogSettings()  # type: ignore[call-arg]


class RegistrySettings(BaseSettings):
    """Remote registry access configuration.

    The user agent has no default: the registry's crawler policy requires a
    descriptive identifier such as ``"my_bot (help@my_bot.com)"``. The factory
    refuses to build a client without one.
    """

    user_agent: str | None = Field(
        None,
        description="Identifying User-Agent sent with every request",
    )
    rate_limit_seconds: float = Field(
        1.0,
        description="Minimum interval between request completions and the next request",
        ge=0,
    )
    base_url: str = Field(
        DEFAULT_BASE_URL,
        description="API origin; endpoint paths are resolved relative to it",
    )
    timeout_seconds: float | None = Field(
        None,
        description="Per-request timeout in seconds (None waits indefinitely)",
    )

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(3, description="Rotated files to keep", ge=0)

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main settings container.

    Automatically loads from the appropriate .env.{REGISTRY_ENV} file.
    """

    registry_env: str = REGISTRY_ENV
    registry: RegistrySettings = Field(default_factory=_build_registry_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance composed from domain-specific settings
settings = Settings()
