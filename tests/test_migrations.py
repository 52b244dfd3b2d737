# tests/test_migrations.py
from sqlalchemy import inspect, text

from database.db import build_engine
from database.migrations import MIGRATIONS, run_migrations, get_applied_migrations, get_schema_version


LEGACY_SCHEMA = [
    """
    CREATE TABLE Journals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        issn TEXT,
        impact_factor REAL,
        quartile TEXT,
        type TEXT NOT NULL CHECK (type IN ('WOS', 'SCOPUS'))
    )
    """,
    """
    CREATE TABLE Publications (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        authors TEXT NOT NULL,
        title TEXT NOT NULL,
        year INTEGER NOT NULL,
        doi TEXT,
        journal_id INTEGER,
        FOREIGN KEY (journal_id) REFERENCES Journals(id) ON DELETE SET NULL
    )
    """,
    "INSERT INTO Journals (id, name, type) VALUES (1, 'Legacy', 'WOS')",
]


def _legacy_engine():
    engine = build_engine("sqlite://")
    with engine.begin() as conn:
        for statement in LEGACY_SCHEMA:
            conn.execute(text(statement))
    return engine


def _journal_id_column(engine):
    return next(c for c in inspect(engine).get_columns("publications") if c["name"] == "journal_id")


def test_fresh_database_applies_all_migrations(engine):
    names = {name for name, _ in MIGRATIONS}
    assert get_applied_migrations(engine) == names
    assert get_schema_version(engine) == len(MIGRATIONS)

    tables = set(inspect(engine).get_table_names())
    assert {"journals", "publications", "schema_version"} <= tables


def test_migrations_are_idempotent(engine):
    assert run_migrations(engine) == []
    assert run_migrations(engine) == []


def test_legacy_database_is_upgraded():
    engine = _legacy_engine()
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO Publications (authors, title, year, journal_id) VALUES ('A', 'T', 2020, 1)"))

    results = run_migrations(engine)

    assert all(r.applied for r in results)
    columns = {c["name"] for c in inspect(engine).get_columns("journals")}
    assert "image_url" in columns
    assert _journal_id_column(engine)["nullable"] is False
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM publications")).scalar_one() == 1
    engine.dispose()


def test_null_journal_rows_block_not_null_migration():
    engine = _legacy_engine()
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO Publications (authors, title, year) VALUES ('A', 'T', 2020)"))

    results = {r.migration_name: r for r in run_migrations(engine)}

    refused = results["0003_publication_journal_not_null"]
    assert refused.applied is False
    assert "1 rows have no journal" in refused.error
    assert "0003_publication_journal_not_null" not in get_applied_migrations(engine)
    assert _journal_id_column(engine)["nullable"] is True

    # Retried once the data is fixed
    with engine.begin() as conn:
        conn.execute(text("UPDATE publications SET journal_id = 1"))
    assert [r.migration_name for r in run_migrations(engine)] == ["0003_publication_journal_not_null"]
    assert _journal_id_column(engine)["nullable"] is False
    engine.dispose()
