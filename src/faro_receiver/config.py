"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. Only the command-line surface
reads settings; the decode and flatten core takes everything it needs as
arguments.

The `get_settings` function provides a cached, singleton instance of the
configuration.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict

OUTPUT_FORMATS = ("logfmt", "json")


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Values come from environment variables or a `.env` file. Command-line
    options override the corresponding setting when given explicitly.
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Logging & runtime behavior
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    DEBUG: bool = Field(
        default=False,
        description="Enable verbose debug logging of decode summaries",
    )

    # ---------------- Record output -----------------
    OUTPUT_FORMAT: str = Field(
        default="logfmt",
        description="Line format for flattened records: 'logfmt' or 'json'",
    )
    INCLUDE_META: bool = Field(
        default=False,
        description=(
            "If true, merge the prefixed payload meta fields (sdk_, app_, user_, "
            "session_, page_, browser_, view_) after each item's own keys"
        ),
    )
    STRICT: bool = Field(
        default=False,
        description=(
            "If true, exit with a failure status when any item of a payload was "
            "dropped. Valid items are still written."
        ),
    )

    @field_validator("OUTPUT_FORMAT", mode="before")
    @classmethod
    def normalize_output_format(cls, v: Any) -> str:
        """Trim and lowercase the format name, rejecting unknown formats."""
        value = str(v).strip().lower() if v is not None else ""
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"OUTPUT_FORMAT must be one of {', '.join(OUTPUT_FORMATS)}")
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v).strip().upper() if v else "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the application settings."""
    return Settings()
