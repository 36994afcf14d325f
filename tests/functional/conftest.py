"""Functional test bootstrap for the Forms Service.

Points the application at a file-backed SQLite database shared across the
process and applies the SQLite migrations once at session start, so the
schema exists before tests create the FastAPI app via TestClient. Each test
starts from empty tables.

This file is scoped under tests/functional/ so Behave (integration) runs
are unaffected.
"""

from __future__ import annotations

import os
import pathlib

import pytest

# Ensure the app points to the test database before any imports of app.main
_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Migrations are applied explicitly below, not at app startup
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"
os.environ["JWT_KEY"] = "functional-tests-signing-key-0123456789abcdef"
# TestClient talks plain http; a Secure cookie would never be sent back
os.environ["AUTH_COOKIE_SECURE"] = "0"

_TABLES = ("submission_file", "submission_answer", "form_submission", "form_document", "app_user")


def _apply_sqlite_migrations() -> None:
    from app.db.base import get_engine
    from app.db.migrations_runner import apply_migrations

    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    apply_migrations(engine, migrations_dir=str(_ROOT / "sqlite_migrations"))


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from app.config import get_config

    get_config.cache_clear()
    _apply_sqlite_migrations()
    yield


@pytest.fixture(autouse=True)
def clean_tables():
    from sqlalchemy import text as sql_text

    from app.db.base import get_engine

    with get_engine().begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    with TestClient(create_app()) as c:
        yield c


def make_user(username: str = "learner", email: str | None = None, role: str = "Learner", password: str = "secret-pass"):
    """Insert a user and return (User, bearer headers)."""
    from app.logic import auth_service, repository_users
    from app.models.user import User

    user = User(
        username=username,
        email=email or f"{username}@example.com",
        password_hash=auth_service.get_password_hash(password),
        role=role,
    )
    user.id = repository_users.create(user)
    token = auth_service.create_token(user)
    return user, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin():
    return make_user("admin", role="Admin")


@pytest.fixture
def learner():
    return make_user("learner", role="Learner")


@pytest.fixture
def user_factory():
    return make_user
