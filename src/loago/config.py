"""Configuration management for loago."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoagoSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    data_file: Path | None = Field(default=None, validation_alias="LOAGO_DATA_FILE")
    log_level: str = Field(default="WARNING", validation_alias="LOAGO_LOG_LEVEL")
    days_suffix: str = Field(default="", validation_alias="LOAGO_DAYS_SUFFIX")
    report_format: Literal["days", "full"] = Field(
        default="days", validation_alias="LOAGO_REPORT_FORMAT"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "LOAGO_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("data_file", mode="before")
    @classmethod
    def _empty_data_file(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    @field_validator("report_format", mode="before")
    @classmethod
    def _normalize_report_format(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache(maxsize=1)
def get_settings() -> LoagoSettings:
    """Return cached settings instance."""

    settings = LoagoSettings()
    if settings.data_file is not None:
        settings.data_file = settings.data_file.expanduser().resolve()
    return settings


__all__ = ["LoagoSettings", "get_settings"]
