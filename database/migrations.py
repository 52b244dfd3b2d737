# database/migrations.py
"""Ordered, idempotent schema migrations for the catalog store.

Each migration runs at most once and is recorded in ``schema_version``.
Migrations are applied explicitly at process startup (or through
``scripts/migrate.py``) before any session is handed out.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Tuple

from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Connection, Engine

from database.db import Base
from database.models.journal_model import Journal
from database.models.publication_model import Publication
from database.models.schema_version_model import SchemaVersion

logger = logging.getLogger(__name__)


class MigrationRefused(Exception):
    """Raised when existing data prevents a migration from being applied."""
    pass


@dataclass
class MigrationResult:
    migration_name: str
    applied: bool
    error: Optional[str] = None


def _column(conn: Connection, table: str, name: str) -> Optional[dict]:
    for col in inspect(conn).get_columns(table):
        if col["name"] == name:
            return col
    return None


def _create_catalog_tables(conn: Connection) -> None:
    Base.metadata.create_all(
        bind=conn,
        tables=[Journal.__table__, Publication.__table__],
        checkfirst=True,
    )


def _add_journal_image_url(conn: Connection) -> None:
    if _column(conn, "journals", "image_url") is None:
        logger.info("Adding image_url column to journals")
        conn.execute(text("ALTER TABLE journals ADD COLUMN image_url TEXT"))


_SQLITE_PUBLICATIONS_REBUILD = [
    """
    CREATE TABLE publications_new (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        authors TEXT NOT NULL,
        title VARCHAR(1024) NOT NULL,
        year INTEGER NOT NULL,
        doi VARCHAR(255),
        journal_id INTEGER NOT NULL REFERENCES journals(id) ON DELETE RESTRICT
    )
    """,
    """
    INSERT INTO publications_new (id, authors, title, year, doi, journal_id)
    SELECT id, authors, title, year, doi, journal_id FROM publications
    """,
    "DROP TABLE publications",
    "ALTER TABLE publications_new RENAME TO publications",
    "CREATE INDEX IF NOT EXISTS ix_publications_year ON publications (year)",
    "CREATE INDEX IF NOT EXISTS ix_publications_journal_id ON publications (journal_id)",
]


def _require_publication_journal(conn: Connection) -> None:
    column = _column(conn, "publications", "journal_id")
    if column is None or not column.get("nullable", False):
        return

    null_count = conn.execute(
        text("SELECT COUNT(*) FROM publications WHERE journal_id IS NULL")
    ).scalar_one()
    if null_count:
        raise MigrationRefused(
            f"Cannot make publications.journal_id NOT NULL: {null_count} rows have no journal. "
            "Update or remove those rows manually."
        )

    logger.info("Tightening publications.journal_id to NOT NULL")
    if conn.dialect.name == "sqlite":
        for statement in _SQLITE_PUBLICATIONS_REBUILD:
            conn.execute(text(statement))
    else:
        conn.execute(text("ALTER TABLE publications ALTER COLUMN journal_id SET NOT NULL"))


MIGRATIONS: List[Tuple[str, Callable[[Connection], None]]] = [
    ("0001_catalog_tables", _create_catalog_tables),
    ("0002_journal_image_url", _add_journal_image_url),
    ("0003_publication_journal_not_null", _require_publication_journal),
]


def get_applied_migrations(engine: Engine) -> Set[str]:
    SchemaVersion.__table__.create(bind=engine, checkfirst=True)
    with engine.connect() as conn:
        return set(conn.execute(select(SchemaVersion.migration_name)).scalars())


def run_migrations(engine: Engine) -> List[MigrationResult]:
    """
    Apply pending migrations in order, each in its own transaction.
    A refused migration is logged and left pending so it is retried on the next run;
    later migrations still run. Any other failure is re-raised.
    """
    applied = get_applied_migrations(engine)
    pending = [name for name, _ in MIGRATIONS if name not in applied]
    if not pending:
        logger.info("All migrations already applied (0 pending)")
        return []

    logger.info(f"Applying {len(pending)} pending migrations: {pending}")
    results: List[MigrationResult] = []

    for name, migrate in MIGRATIONS:
        if name in applied:
            continue
        try:
            with engine.begin() as conn:
                migrate(conn)
                conn.execute(SchemaVersion.__table__.insert().values(migration_name=name))
            results.append(MigrationResult(name, True))
            logger.info(f"Applied migration: {name}")
        except MigrationRefused as e:
            logger.error(f"Migration {name} refused: {e}")
            results.append(MigrationResult(name, False, error=str(e)))
        except Exception as e:
            logger.error(f"Migration {name} failed: {e}", exc_info=True)
            raise

    return results


def get_schema_version(engine: Engine) -> int:
    return len(get_applied_migrations(engine))
