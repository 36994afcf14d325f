"""Submission store helpers.

A submission is written as one aggregate: the `form_submission` row, its
answers and its files in a single transaction. Reads reassemble the
aggregate with answers and files attached.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import text as sql_text

from app.db.base import get_engine, is_sqlite
from app.models.submission import Submission, SubmissionAnswer, SubmissionFile

logger = logging.getLogger(__name__)


def _ts(eng, value: Optional[datetime]):
    value = value or datetime.now(timezone.utc)
    # SQLite stores ISO text; other dialects bind a real timestamp
    return value.isoformat() if is_sqlite(eng) else value


def _answers_for(conn, submission_ids: list[int]) -> dict[int, list[SubmissionAnswer]]:
    out: dict[int, list[SubmissionAnswer]] = {sid: [] for sid in submission_ids}
    for sid in submission_ids:
        rows = conn.execute(
            sql_text(
                "SELECT id, submission_id, question_id, answer_type, answer_text "
                "FROM submission_answer WHERE submission_id = :sid ORDER BY id"
            ),
            {"sid": sid},
        ).mappings().all()
        out[sid] = [SubmissionAnswer(**dict(r)) for r in rows]
    return out


_FILE_SELECT = (
    "SELECT f.id, f.submission_id, f.question_id, f.file_name, f.file_data, f.mime_type, "
    "f.uploaded_at, s.user_id, u.username "
    "FROM submission_file f "
    "JOIN form_submission s ON s.id = f.submission_id "
    "LEFT JOIN app_user u ON u.id = s.user_id "
)


def _files_for(conn, submission_ids: list[int]) -> dict[int, list[SubmissionFile]]:
    out: dict[int, list[SubmissionFile]] = {sid: [] for sid in submission_ids}
    for sid in submission_ids:
        rows = conn.execute(
            sql_text(_FILE_SELECT + "WHERE f.submission_id = :sid ORDER BY f.id"),
            {"sid": sid},
        ).mappings().all()
        out[sid] = [SubmissionFile(**dict(r)) for r in rows]
    return out


def _load_aggregates(conn, rows) -> list[Submission]:
    ids = [int(r["id"]) for r in rows]
    answers = _answers_for(conn, ids)
    files = _files_for(conn, ids)
    return [
        Submission(
            id=int(r["id"]),
            form_id=r["form_id"],
            user_id=int(r["user_id"]),
            submitted_at=r["submitted_at"],
            username=r["username"],
            answers=answers[int(r["id"])],
            files=files[int(r["id"])],
        )
        for r in rows
    ]


_SUBMISSION_SELECT = (
    "SELECT s.id, s.form_id, s.user_id, s.submitted_at, u.username "
    "FROM form_submission s LEFT JOIN app_user u ON u.id = s.user_id "
)


def create_submission(submission: Submission, *, exclusive: bool = False) -> Optional[int]:
    """Persist `submission` with its answers and files; return the new id.

    With `exclusive=True` the header row is inserted only when the user has
    no submission for the form yet; None is returned when one already exists.
    """
    eng = get_engine()
    params = {
        "fid": submission.form_id,
        "uid": int(submission.user_id),
        "ts": _ts(eng, submission.submitted_at),
    }
    if exclusive:
        insert = (
            "INSERT INTO form_submission (form_id, user_id, submitted_at) "
            "SELECT :fid, :uid, :ts WHERE NOT EXISTS ("
            "SELECT 1 FROM form_submission WHERE form_id = :fid AND user_id = :uid) "
            "RETURNING id"
        )
    else:
        insert = (
            "INSERT INTO form_submission (form_id, user_id, submitted_at) "
            "VALUES (:fid, :uid, :ts) RETURNING id"
        )
    try:
        with eng.begin() as conn:
            row = conn.execute(sql_text(insert), params).fetchone()
            if row is None:
                return None
            submission_id = int(row[0])
            for a in submission.answers:
                conn.execute(
                    sql_text(
                        "INSERT INTO submission_answer (submission_id, question_id, answer_type, answer_text) "
                        "VALUES (:sid, :qid, :atype, :atext)"
                    ),
                    {"sid": submission_id, "qid": a.question_id, "atype": a.answer_type, "atext": a.answer_text},
                )
            for f in submission.files:
                conn.execute(
                    sql_text(
                        "INSERT INTO submission_file "
                        "(submission_id, question_id, file_name, file_data, mime_type, uploaded_at) "
                        "VALUES (:sid, :qid, :name, :data, :mime, :ts)"
                    ),
                    {
                        "sid": submission_id,
                        "qid": f.question_id,
                        "name": f.file_name,
                        "data": f.file_data or "",
                        "mime": f.mime_type,
                        "ts": _ts(eng, f.uploaded_at),
                    },
                )
            return submission_id
    except Exception:
        logger.error(
            "create_submission failed form_id=%s user_id=%s",
            submission.form_id,
            submission.user_id,
            exc_info=True,
        )
        raise


def get_submission_by_id(submission_id: int) -> Optional[Submission]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(_SUBMISSION_SELECT + "WHERE s.id = :sid"),
                {"sid": int(submission_id)},
            ).mappings().all()
            loaded = _load_aggregates(conn, rows)
    except Exception:
        logger.error("get_submission_by_id failed id=%s", submission_id, exc_info=True)
        raise
    return loaded[0] if loaded else None


def get_submissions_by_user_id(user_id: int) -> list[Submission]:
    """Return the user's submissions, newest first."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(_SUBMISSION_SELECT + "WHERE s.user_id = :uid ORDER BY s.submitted_at DESC, s.id DESC"),
                {"uid": int(user_id)},
            ).mappings().all()
            return _load_aggregates(conn, rows)
    except Exception:
        logger.error("get_submissions_by_user_id failed user_id=%s", user_id, exc_info=True)
        raise


def get_submissions_by_form_id(form_id: str) -> list[Submission]:
    """Return the form's submissions, newest first."""
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(_SUBMISSION_SELECT + "WHERE s.form_id = :fid ORDER BY s.submitted_at DESC, s.id DESC"),
                {"fid": str(form_id)},
            ).mappings().all()
            return _load_aggregates(conn, rows)
    except Exception:
        logger.error("get_submissions_by_form_id failed form_id=%s", form_id, exc_info=True)
        raise


def has_user_submitted_form(user_id: int, form_id: str) -> bool:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text("SELECT COUNT(*) FROM form_submission WHERE user_id = :uid AND form_id = :fid"),
                {"uid": int(user_id), "fid": str(form_id)},
            ).fetchone()
            return bool(row and int(row[0]) > 0)
    except Exception:
        logger.error("has_user_submitted_form failed user_id=%s form_id=%s", user_id, form_id, exc_info=True)
        raise


def get_submission_count_by_form_id(form_id: str) -> int:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text("SELECT COUNT(*) FROM form_submission WHERE form_id = :fid"),
                {"fid": str(form_id)},
            ).fetchone()
            return int(row[0]) if row and row[0] is not None else 0
    except Exception:
        logger.error("get_submission_count_by_form_id failed form_id=%s", form_id, exc_info=True)
        raise


def get_files_by_form_id(form_id: str) -> list[SubmissionFile]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            rows = conn.execute(
                sql_text(_FILE_SELECT + "WHERE s.form_id = :fid ORDER BY f.uploaded_at DESC, f.id DESC"),
                {"fid": str(form_id)},
            ).mappings().all()
    except Exception:
        logger.error("get_files_by_form_id failed form_id=%s", form_id, exc_info=True)
        raise
    return [SubmissionFile(**dict(r)) for r in rows]


def get_file_by_id(file_id: int) -> Optional[SubmissionFile]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(_FILE_SELECT + "WHERE f.id = :fid"),
                {"fid": int(file_id)},
            ).mappings().first()
    except Exception:
        logger.error("get_file_by_id failed file_id=%s", file_id, exc_info=True)
        raise
    return SubmissionFile(**dict(row)) if row is not None else None


def get_files_by_submission_id(submission_id: int) -> list[SubmissionFile]:
    eng = get_engine()
    try:
        with eng.connect() as conn:
            return _files_for(conn, [int(submission_id)])[int(submission_id)]
    except Exception:
        logger.error("get_files_by_submission_id failed id=%s", submission_id, exc_info=True)
        raise


__all__ = [
    "create_submission",
    "get_submission_by_id",
    "get_submissions_by_user_id",
    "get_submissions_by_form_id",
    "has_user_submitted_form",
    "get_submission_count_by_form_id",
    "get_files_by_form_id",
    "get_file_by_id",
    "get_files_by_submission_id",
]
