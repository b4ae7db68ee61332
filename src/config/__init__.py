"""Configuration module."""

from src.config.logging import configure_logging, get_logger, product_log_context
from src.config.settings import (
    CostingSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "CostingSettings",
    "StorageSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "product_log_context",
]
