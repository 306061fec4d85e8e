"""Configuration management for bashtestmd."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bashtestmd.types import SynthesisOptions


class Settings(BaseSettings):
    """Generation settings, read from ``BASHTESTMD_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="BASHTESTMD_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Generated script
    wait_timeout: int = Field(default=300, gt=0, description="Seconds to poll for wait-until text")
    poll_interval: int = Field(default=5, gt=0, description="Seconds between wait-until polls")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["default", "rich"] = Field(default="default", description="Log output profile")

    def synthesis_options(self) -> SynthesisOptions:
        return SynthesisOptions(wait_timeout=self.wait_timeout, poll_interval=self.poll_interval)


def load_settings(**overrides: Any) -> Settings:
    """Load settings, letting non-None overrides win over the environment."""

    return Settings(**{key: value for key, value in overrides.items() if value is not None})
