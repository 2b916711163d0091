"""
Versioned schema migrations for the LabTrack database.

Migration files are named ``vNNN_description.sql`` and applied in version
order. Each applied file is recorded in ``schema_migrations`` with a checksum;
editing a file after it was applied is refused rather than silently re-run.
The database file is copied aside before migrating and restored on failure.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from labtrack.config import configure_logging, get_logger, get_settings
from labtrack.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

MIGRATION_NAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "inventory_items",
    "stock_movements",
    "machines",
    "machine_parts",
    "usage_logs",
    "maintenances",
    "maintenance_parts",
    "notifications",
    "incident_reports",
    "schema_migrations",
]


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_NAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``directory``, lowest version first."""
    migrations = []
    for path in directory.glob("v*.sql"):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums; empty on a fresh database."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


def pending_migrations(
    available: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo]:
    """
    Migrations not yet applied.

    Raises:
        DatabaseError: An applied migration's file no longer matches its checksum
    """
    changed = [
        m.version for m in available if m.version in applied and applied[m.version] != m.checksum
    ]
    if changed:
        raise DatabaseError(
            "migration", f"applied migrations were modified: {', '.join(changed)}"
        )
    return [m for m in available if m.version not in applied]


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - start) * 1000),
            error=str(e),
        )

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed_ms,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file next to itself with a timestamped suffix."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file aside first; the copy is
            removed again when every migration succeeds

    Returns:
        Results for the migrations that were attempted, empty when up to date
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending = pending_migrations(discover_migrations(), await get_applied_migrations(conn))
            logger.info("initializing_database", db_path=str(db_path), pending=len(pending))

            for migration in pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception:
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    failed = [r for r in results if not r.success]
    if failed and backup_path is not None:
        restore_backup(db_path, backup_path)
    elif backup_path is not None:
        backup_path.unlink()

    return results


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Run SQLite's own checks plus the LabTrack schema checks.

    Each entry has ``check`` and ``status`` ("PASS" or "FAIL") and check-specific details.
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "FAIL" if violations else "PASS",
            "violations": len(violations),
        })

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity == "ok" else "FAIL",
            "result": integrity,
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append({
            "check": "required_tables",
            "status": "FAIL" if missing else "PASS",
            "missing": missing,
        })

        applied = await get_applied_migrations(conn)
        try:
            pending = [m.version for m in pending_migrations(discover_migrations(), applied)]
            checks.append({
                "check": "migrations",
                "status": "FAIL" if pending else "PASS",
                "pending": pending,
            })
        except DatabaseError as e:
            checks.append({"check": "migrations", "status": "FAIL", "error": e.message})

    return checks


async def migration_status(db_path: Path | None = None) -> list[tuple[MigrationInfo, bool]]:
    """Every known migration paired with whether it has been applied."""
    db_path = db_path or get_settings().storage.db_path
    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
    return [(m, m.version in applied) for m in discover_migrations()]


def main() -> None:
    """``labtrack-migrate`` entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Apply LabTrack database migrations")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--verify", action="store_true", help="Run schema integrity checks")
    group.add_argument("--status", action="store_true", help="List applied and pending migrations")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    args = parser.parse_args()

    configure_logging()

    async def run() -> int:
        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"[{check['status']}] {check['check']}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        if args.status:
            for migration, applied in await migration_status(args.db_path):
                mark = "x" if applied else " "
                print(f"[{mark}] v{migration.version} {migration.name}")
            return 0

        results = await initialize_database(
            args.db_path, create_backup_before=not args.no_backup
        )
        if not results:
            print("Database is up to date")
        for result in results:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"    {result.error}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
