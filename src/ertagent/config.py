"""Configuration management for ertagent."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging_utils import configure_logging


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ERTAGENT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider Configuration
    model: str = Field(default="openai/gpt-4o-mini", description="Model in provider/model form")
    api_key: Optional[str] = Field(None, description="API key for the LLM provider")
    api_base: Optional[str] = Field(None, description="Optional API base URL")
    max_tokens: int = Field(default=4096, description="Maximum tokens for responses")

    # Emacs Configuration
    emacs_path: str = Field(default="emacs", description="Emacs executable")
    emacsclient_path: str = Field(default="emacsclient", description="emacsclient executable")
    eval_timeout_seconds: float = Field(default=30, description="Timeout for one evaluation in seconds")
    startup_timeout_seconds: float = Field(default=10, description="Deadline for the server socket to appear")
    poll_interval_seconds: float = Field(default=0.1, description="Interval between readiness checks")
    shutdown_grace_seconds: float = Field(default=2, description="Wait after kill-emacs before killing the process")

    # Agent Configuration
    max_iterations: int = Field(default=20, ge=1, description="Maximum number of agent iterations")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")


def get_settings(**overrides: Any) -> Settings:
    """Get application settings.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Settings instance
    """
    settings = Settings(**{key: value for key, value in overrides.items() if value is not None})
    configure_logging(settings.log_level)
    return settings
