"""Database migrations module."""

from labtrack.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    create_backup,
    discover_migrations,
    initialize_database,
    migration_status,
    pending_migrations,
    restore_backup,
    verify_schema_integrity,
)

# Alias used by the API lifespan
run_migrations = initialize_database

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "create_backup",
    "discover_migrations",
    "initialize_database",
    "migration_status",
    "pending_migrations",
    "restore_backup",
    "run_migrations",
    "verify_schema_integrity",
]
