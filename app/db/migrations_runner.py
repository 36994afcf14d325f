"""Lightweight SQL migrations runner.

Applies .sql files in lexical order from a migrations directory. Skips
rollback files and records applied filenames in a `schema_migration`
table so the journal lives with the database it describes. Intended for
local development and CI; production environments should use the
platform's migration mechanism.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migration ("
    " filename VARCHAR(255) PRIMARY KEY,"
    " applied_at VARCHAR(32) NOT NULL"
    ")"
)


def default_migrations_dir(engine: Engine) -> Path:
    """Return the dialect-specific migrations directory for `engine`."""
    name = (getattr(engine.dialect, "name", "") or "").lower()
    folder = "sqlite_migrations" if name == "sqlite" else "migrations"
    return PROJECT_ROOT / folder


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if "rollback" in p.name.lower():
            continue
        yield p


def _split_statements(sql: str) -> list[str]:
    """Split a script on ';' after removing '--' comments.

    Comments are stripped line by line first so a ';' inside a comment never
    splits a statement. Migration files must not embed ';' or '--' inside
    literals; the DB-API drivers used here do not all accept
    multi-statement strings.
    """
    code_lines = [ln.split("--", 1)[0].rstrip() for ln in sql.splitlines()]
    statements: list[str] = []
    for chunk in "\n".join(code_lines).split(";"):
        stmt = chunk.strip()
        if not stmt:
            continue
        if stmt.upper() in {"BEGIN", "COMMIT", "END"}:
            continue
        statements.append(stmt)
    return statements


def _applied_filenames(conn: Connection) -> set[str]:
    rows = conn.execute(sql_text("SELECT filename FROM schema_migration")).fetchall()
    return {str(r[0]) for r in rows}


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations and return the filenames applied in this run."""
    root = Path(migrations_dir) if migrations_dir is not None else default_migrations_dir(engine)
    if not root.exists():  # pragma: no cover - optional
        logger.warning("migrations_dir_missing path=%s", str(root))
        return []

    applied_now: list[str] = []
    with engine.begin() as conn:
        conn.execute(sql_text(_JOURNAL_DDL))
        applied = _applied_filenames(conn)
        for sql_path in _iter_sql_files(root):
            fname = sql_path.name
            if fname in applied:
                continue
            sql = sql_path.read_text(encoding="utf-8")
            try:
                for stmt in _split_statements(sql):
                    conn.exec_driver_sql(stmt)
            except Exception:
                logger.error("migration_failed file=%s", fname, exc_info=True)
                raise
            conn.execute(
                sql_text("INSERT INTO schema_migration (filename, applied_at) VALUES (:f, :t)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds (e.g., 2024-01-01T00:00:00Z)
                    "t": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
            applied_now.append(fname)
    if applied_now:
        logger.info("migrations_applied files=%s", ",".join(applied_now))
    return applied_now


__all__ = ["apply_migrations", "default_migrations_dir"]
