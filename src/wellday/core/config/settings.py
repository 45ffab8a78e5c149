"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Wellday advisor server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Default to loopback; the server has no auth layer.
    wellday_host: str = "127.0.0.1"
    wellday_port: int = 8001
    wellday_log_level: str = "info"
    # Binding to a non-loopback host is refused unless this is set true.
    wellday_allow_insecure_bind: bool = False

    # Advisor
    # When set, message selection and meal analysis become reproducible.
    advisor_seed: int | None = None
    # Used by daily_advice when the caller does not pass a budget.
    default_daily_budget: float | None = None


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
