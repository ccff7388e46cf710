"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Weightview server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: weight readings are personal health data and the
    # server has no auth layer. Opt into `0.0.0.0` explicitly.
    weightview_host: str = "127.0.0.1"
    weightview_port: int = 8011
    weightview_log_level: str = "info"
    weightview_allow_insecure_bind: bool = False

    # Readings store
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    seed_mock_readings: bool = False

    # Storage (health data bank)
    db_path: str = "~/.weightview/readings.db"

    # Encryption
    encryption_key: str = ""

    # Permissions
    # When true, a permission request grants the weight capabilities
    # without further confirmation (single-user local installs).
    auto_grant_permissions: bool = True


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
