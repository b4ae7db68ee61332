"""Database migrations module."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    initialize_database,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "initialize_database",
]
