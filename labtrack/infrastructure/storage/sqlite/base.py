"""Row conversion and version-check helpers shared by the SQLite stores."""

from datetime import date, datetime

import aiosqlite

from labtrack.core.exceptions import ConflictError, NotFoundError


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def parse_datetime(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return datetime.utcnow()


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


async def raise_update_miss(
    conn: aiosqlite.Connection,
    table: str,
    entity_id: int,
    entity_name: str,
    expected_version: int,
    not_found: type[NotFoundError],
) -> None:
    """
    Explain why a versioned UPDATE matched no rows.

    Raises ``not_found`` if the row is gone, ConflictError otherwise.
    """
    cursor = await conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (entity_id,))
    if await cursor.fetchone() is None:
        raise not_found(entity_id)
    raise ConflictError(entity_name, entity_id, expected_version)
