"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

import decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.exceptions import ConfigurationError

ROUNDING_MODES = (
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_UP,
    decimal.ROUND_DOWN,
    decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR,
    decimal.ROUND_05UP,
)


class CostingSettings(BaseSettings):
    """Inventory costing configuration."""

    model_config = SettingsConfigDict(env_prefix="COSTING_")

    # Minor-unit precision of the reporting currency
    currency_places: int = Field(default=2, ge=0, le=8)
    rounding_mode: str = decimal.ROUND_HALF_UP

    # Optimistic concurrency
    max_write_retries: int = Field(default=3, ge=0)

    batch_id_prefix: str = "BATCH"

    @field_validator("rounding_mode")
    @classmethod
    def check_rounding_mode(cls, v: str) -> str:
        mode = v.strip().upper()
        if mode not in ROUNDING_MODES:
            raise ValueError(
                f"unknown rounding mode '{v}', expected one of {', '.join(ROUNDING_MODES)}"
            )
        return mode


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "costing.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Inventory Costing Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    costing: CostingSettings = Field(default_factory=CostingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Raises:
        ConfigurationError: The environment holds an invalid setting.
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid settings: {e}",
                code="CONFIGURATION_ERROR",
                details={"fields": [".".join(map(str, err["loc"])) for err in e.errors()]},
            ) from e
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
