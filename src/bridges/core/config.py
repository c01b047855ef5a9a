"""Application configuration loaded from environment."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "BRIDGES_", "populate_by_name": True}

    bridge: str = Field(
        default="",
        validation_alias=AliasChoices("bridge", "BRIDGE", "BRIDGES_BRIDGE"),
    )
    host: str = "0.0.0.0"
    port: int = 8080
    timeout_seconds: float = 30
    log_level: str = "INFO"
