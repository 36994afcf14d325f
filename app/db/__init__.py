"""Database bootstrap utilities for the Forms Service.

Exposes engine construction and the SQL migrations runner that applies
files from `migrations/` (PostgreSQL) or `sqlite_migrations/` (SQLite).
Row-to-model mapping stays inside the repositories under `app/logic/`.
"""

from app.db.base import get_engine, is_sqlite
from app.db.migrations_runner import apply_migrations, default_migrations_dir

__all__ = [
    "get_engine",
    "is_sqlite",
    "apply_migrations",
    "default_migrations_dir",
]
