"""Form document store.

Each form is kept whole as a JSON document in `form_document`, keyed by its
string id; `status` and `created_at` are mirrored into columns for listing.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import text as sql_text

from app.db.base import get_engine
from app.models.form import Form, FormStatus

logger = logging.getLogger(__name__)


def _row_to_form(row) -> Form:
    return Form.model_validate_json(row["document"])


def create_form(form: Form) -> Form:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(
                sql_text(
                    "INSERT INTO form_document (form_id, status, created_at, document) "
                    "VALUES (:fid, :status, :created_at, :doc)"
                ),
                {
                    "fid": form.id,
                    "status": form.status,
                    "created_at": form.created_at.isoformat(),
                    "doc": form.model_dump_json(),
                },
            )
    except Exception:
        logger.error("create_form failed form_id=%s", form.id, exc_info=True)
        raise
    return form


def get_form_by_id(form_id: str) -> Optional[Form]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text("SELECT document FROM form_document WHERE form_id = :fid"),
                {"fid": str(form_id)},
            ).mappings().first()
    except Exception:
        logger.error("get_form_by_id failed form_id=%s", form_id, exc_info=True)
        raise
    return _row_to_form(row) if row is not None else None


def get_all_forms() -> list[Form]:
    """Return every stored form, oldest first."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text("SELECT document FROM form_document ORDER BY created_at, form_id")
            ).mappings().all()
    except Exception:
        logger.error("get_all_forms failed", exc_info=True)
        raise
    return [_row_to_form(r) for r in rows]


def update_form(form_id: str, form: Form) -> bool:
    """Replace the stored document for `form_id`; False when nothing matched."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    "UPDATE form_document SET status = :status, document = :doc WHERE form_id = :fid"
                ),
                {"fid": str(form_id), "status": form.status, "doc": form.model_dump_json()},
            )
            return (result.rowcount or 0) > 0
    except Exception:
        logger.error("update_form failed form_id=%s", form_id, exc_info=True)
        raise


def publish_form(form_id: str, form: Form) -> bool:
    if form.status != FormStatus.PUBLISHED:
        form = form.model_copy(update={"status": FormStatus.PUBLISHED})
    return update_form(form_id, form)


def delete_form(form_id: str) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("DELETE FROM form_document WHERE form_id = :fid"),
                {"fid": str(form_id)},
            )
            return (result.rowcount or 0) > 0
    except Exception:
        logger.error("delete_form failed form_id=%s", form_id, exc_info=True)
        raise


__all__ = [
    "create_form",
    "get_form_by_id",
    "get_all_forms",
    "update_form",
    "publish_form",
    "delete_form",
]
