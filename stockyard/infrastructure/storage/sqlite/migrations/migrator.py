"""
Versioned schema migrations for the stock ledger database.

Migration files are named ``vNNN_<name>.sql`` and live beside this module.
Each applied file is recorded in ``schema_migrations`` with a checksum; a file
edited after it was applied stops the run instead of being replayed.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockyard.config import get_logger, get_settings
from stockyard.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_FILE = re.compile(r"^v(\d+)_(\w+)\.sql$")

REQUIRED_TABLES = (
    "schema_migrations",
    "stock_locations",
    "stock_categories",
    "stock_items",
    "stock_serialized_items",
    "stock_quantities",
    "stock_transactions",
    "stock_counts",
    "hire_bookings",
)


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILE.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path | None = None) -> list[MigrationInfo]:
    """Migration files in version order; badly named files are skipped."""
    found = []
    for path in (directory or MIGRATIONS_DIR).glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError:
            logger.warning("migration_file_ignored", path=str(path))
    return sorted(found, key=lambda m: int(m.version))


async def _has_table(conn: aiosqlite.Connection, name: str) -> bool:
    cursor = await conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    )
    return await cursor.fetchone() is not None


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied version to recorded checksum."""
    if not await _has_table(conn, "schema_migrations"):
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    if not applied:
        return None
    return max(applied, key=int)


async def _pending(conn: aiosqlite.Connection) -> list[MigrationInfo]:
    applied = await get_applied_migrations(conn)
    pending = []
    for migration in discover_migrations():
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise DatabaseError(
                "migrate",
                f"v{migration.version}_{migration.name} changed after it was applied",
            )
    return pending


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(migration.version, migration.name, True, elapsed)


def create_backup(db_path: Path) -> Path:
    """Copy the database file next to itself before migrating."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
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
    Bring the database up to the latest schema version.

    Applies pending migrations in order and stops at the first failure. When
    a backup was taken, a failed run restores it and a clean run deletes it.

    Returns:
        Results for the migrations attempted in this run (empty when the
        schema was already current).
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()

    async with aiosqlite.connect(db_path) as conn:
        pending = await _pending(conn)
    if not pending:
        logger.info("schema_current", db_path=str(db_path))
        return []

    backup_path = None
    if create_backup_before and existed:
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        for migration in pending:
            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break

    failed = not results[-1].success
    if backup_path is not None:
        if failed:
            restore_backup(db_path, backup_path)
        else:
            backup_path.unlink()

    logger.info(
        "database_migrated" if not failed else "database_migration_stopped",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions for a database file."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "total_migrations": len(discovered),
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        current = await get_current_version(conn)

    return {
        "exists": True,
        "current_version": current,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def _check_foreign_keys(conn: aiosqlite.Connection) -> dict:
    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = await cursor.fetchall()
    return {
        "check": "foreign_keys",
        "status": "FAIL" if violations else "PASS",
        "violations": len(violations),
    }


async def _check_integrity(conn: aiosqlite.Connection) -> dict:
    cursor = await conn.execute("PRAGMA integrity_check")
    (result,) = await cursor.fetchone()
    return {"check": "integrity", "status": "PASS" if result == "ok" else "FAIL", "result": result}


async def _check_required_tables(conn: aiosqlite.Connection) -> dict:
    missing = [name for name in REQUIRED_TABLES if not await _has_table(conn, name)]
    return {"check": "required_tables", "status": "FAIL" if missing else "PASS", "missing": missing}


async def _check_ledger_balance(conn: aiosqlite.Connection) -> dict:
    # available must equal on_hand - allocated on every bulk quantity row
    unbalanced = []
    if await _has_table(conn, "stock_quantities"):
        cursor = await conn.execute(
            """
            SELECT id, item_id, location_id FROM stock_quantities
            WHERE ABS(quantity_available - (quantity_on_hand - quantity_allocated)) > 1e-9
            ORDER BY id
            """
        )
        unbalanced = [
            {"id": row_id, "item_id": item_id, "location_id": location_id}
            for row_id, item_id, location_id in await cursor.fetchall()
        ]
    return {
        "check": "ledger_balance",
        "status": "FAIL" if unbalanced else "PASS",
        "unbalanced_rows": unbalanced,
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Run the structural and ledger checks against a database.

    Each check is a dict with ``check`` and ``status`` (``PASS``/``FAIL``)
    plus check-specific detail. ``ledger_balance`` catches quantity rows
    edited outside the application.
    """
    db_path = db_path or get_settings().storage.db_path
    async with aiosqlite.connect(db_path) as conn:
        return [
            await _check_foreign_keys(conn),
            await _check_integrity(conn),
            await _check_required_tables(conn),
            await _check_ledger_balance(conn),
        ]
