"""User store helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import text as sql_text

from app.db.base import get_engine, is_sqlite
from app.models.user import User

logger = logging.getLogger(__name__)

_COLUMNS = "id, username, email, password_hash, role, created_at"


def _row_to_user(row) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=row["role"],
        created_at=row["created_at"],
    )


def get_by_email(email: str) -> Optional[User]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM app_user WHERE email = :email"),
                {"email": str(email)},
            ).mappings().first()
    except Exception:
        logger.error("get_by_email failed", exc_info=True)
        raise
    return _row_to_user(row) if row is not None else None


def get_by_id(user_id: int) -> Optional[User]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT {_COLUMNS} FROM app_user WHERE id = :uid"),
                {"uid": int(user_id)},
            ).mappings().first()
    except Exception:
        logger.error("get_by_id failed user_id=%s", user_id, exc_info=True)
        raise
    return _row_to_user(row) if row is not None else None


def create(user: User) -> int:
    """Insert `user` and return the generated id."""
    eng = get_engine()
    created_at = user.created_at or datetime.now(timezone.utc)
    params = {
        "username": user.username,
        "email": user.email,
        "ph": user.password_hash,
        "role": user.role,
        "created_at": created_at.isoformat() if is_sqlite(eng) else created_at,
    }
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(
                    "INSERT INTO app_user (username, email, password_hash, role, created_at) "
                    "VALUES (:username, :email, :ph, :role, :created_at) RETURNING id"
                ),
                params,
            ).fetchone()
            return int(row[0])
    except Exception:
        logger.error("create user failed", exc_info=True)
        raise


__all__ = ["get_by_email", "get_by_id", "create"]
