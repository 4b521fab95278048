from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class Settings(BaseModel):
    default_regime: str = Field(default_factory=lambda: _env_str("TAXCALC_DEFAULT_REGIME", "new"))
    default_tax_year: str = Field(default_factory=lambda: _env_str("TAXCALC_DEFAULT_TAX_YEAR", "2025"))
    regime_table_path: str | None = Field(default_factory=lambda: _env_optional("TAXCALC_REGIME_TABLE"))
    log_level: str = Field(default_factory=lambda: _env_str("TAXCALC_LOG_LEVEL", "INFO"))
    log_dir: str | None = Field(default_factory=lambda: _env_optional("TAXCALC_LOG_DIR"))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        upper = (value or "INFO").upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"TAXCALC_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {upper}")
        return upper

    @field_validator("default_tax_year", mode="before")
    @classmethod
    def _validate_tax_year(cls, value: str) -> str:
        text = str(value).strip()
        if not any(ch.isdigit() for ch in text):
            raise ValueError(f"TAXCALC_DEFAULT_TAX_YEAR must contain a year, got {text!r}")
        return text

    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
