"""Draft/published state machine for forms.

Status and mode values are compared after normalizing (strip + lowercase);
stored documents written by older clients may carry "Published".
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.logic import form_builder
from app.logic.errors import AlreadyPublished, DeleteBlocked, EditBlocked, InvalidMode
from app.models.form import Form, FormStatus
from app.models.form_payloads import CreateFormPayload


logger = logging.getLogger(__name__)


class EditMode:
    DRAFT = "draft"
    PUBLISH = "publish"


_VALID_MODES = frozenset({EditMode.DRAFT, EditMode.PUBLISH})


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_mode(mode: str | None) -> str:
    """Return the canonical edit mode; None/blank means draft."""
    if mode is None or not str(mode).strip():
        return EditMode.DRAFT
    normalized = _norm(mode)
    if normalized not in _VALID_MODES:
        raise InvalidMode("Mode must be either 'draft' or 'publish'")
    return normalized


def is_published(form: Form) -> bool:
    return _norm(form.status) == FormStatus.PUBLISHED


def publish(form: Form, published_by: str | None, *, now: datetime | None = None) -> Form:
    if is_published(form):
        raise AlreadyPublished("Form is already published")
    return _mark_published(form, published_by, now)


def _mark_published(form: Form, published_by: str | None, now: datetime | None) -> Form:
    return form.model_copy(
        update={
            "status": FormStatus.PUBLISHED,
            "published_at": now or datetime.now(timezone.utc),
            "published_by": published_by,
        }
    )


def edit(
    form: Form,
    payload: CreateFormPayload,
    mode: str | None,
    updated_by: str | None,
    *,
    now: datetime | None = None,
) -> Form:
    """Apply authoring edits to `form` under `mode`.

    - draft on a published form: EditBlocked
    - draft on a draft form: edits only, status stays draft
    - publish: edits, then publish metadata is refreshed unconditionally
    """
    normalized = normalize_mode(mode)
    if normalized == EditMode.DRAFT and is_published(form):
        raise EditBlocked("Cannot edit a published form. Published forms are read-only.")
    edited = form_builder.apply_edits(form, payload, updated_by, now=now)
    if normalized == EditMode.PUBLISH:
        edited = _mark_published(edited, updated_by, edited.updated_at)
    return edited


def ensure_deletable(form: Form) -> None:
    if is_published(form):
        raise DeleteBlocked("Cannot delete a published form. Published forms must be archived instead of deleted.")


__all__ = [
    "EditMode",
    "normalize_mode",
    "is_published",
    "publish",
    "edit",
    "ensure_deletable",
]
