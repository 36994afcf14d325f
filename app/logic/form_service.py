"""Form authoring operations: create, query, publish, edit, delete.

Each operation resolves the form through `repository_forms`, applies the
builder or lifecycle rule, and writes the aggregate back.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.logic import form_builder, form_lifecycle, repository_forms, repository_submissions
from app.logic.errors import InvalidState, NotFound
from app.logic.response_mapper import to_form_response
from app.models.form_payloads import CreateFormPayload, UpdateFormPayload
from app.models.response_types import FormResponse

logger = logging.getLogger(__name__)


def _require_form(form_id: str):
    form = repository_forms.get_form_by_id(form_id)
    if form is None:
        raise NotFound("Form not found")
    return form


def create_form(payload: CreateFormPayload, created_by: Optional[str] = None) -> FormResponse:
    form = form_builder.build_form(payload, created_by)
    stored = repository_forms.create_form(form)
    logger.info(
        "form_created",
        extra={"form_id": stored.id, "questions": len(stored.questions), "created_by": created_by},
    )
    return to_form_response(stored)


def get_form(form_id: str) -> FormResponse:
    return to_form_response(_require_form(form_id))


def list_forms() -> list[FormResponse]:
    return [to_form_response(f) for f in repository_forms.get_all_forms()]


def publish_form(form_id: str, published_by: Optional[str] = None) -> FormResponse:
    form = _require_form(form_id)
    published = form_lifecycle.publish(form, published_by)
    if not repository_forms.publish_form(form_id, published):
        # Row vanished between the read and the write
        raise NotFound("Form not found")
    logger.info("form_published", extra={"form_id": form_id, "published_by": published_by})
    return to_form_response(published)


def update_form(form_id: str, payload: UpdateFormPayload, updated_by: Optional[str] = None) -> FormResponse:
    """Apply edits under `payload.mode` (draft by default)."""
    form = _require_form(form_id)
    edited = form_lifecycle.edit(form, payload, payload.mode, updated_by)
    if not repository_forms.update_form(form_id, edited):
        raise NotFound("Form not found")
    logger.info(
        "form_updated",
        extra={"form_id": form_id, "mode": form_lifecycle.normalize_mode(payload.mode), "status": edited.status},
    )
    return to_form_response(edited)


def delete_form(form_id: str) -> None:
    form = _require_form(form_id)
    form_lifecycle.ensure_deletable(form)
    if not repository_forms.delete_form(form_id):
        raise InvalidState("Failed to delete form")
    logger.info("form_deleted", extra={"form_id": form_id})


def can_user_submit_form(form_id: str, user_id: int) -> bool:
    form = repository_forms.get_form_by_id(form_id)
    if form is None or not form_lifecycle.is_published(form):
        return False
    if form.config.allow_multiple_submissions:
        return True
    return not repository_submissions.has_user_submitted_form(user_id, form_id)


__all__ = [
    "create_form",
    "get_form",
    "list_forms",
    "publish_form",
    "update_form",
    "delete_form",
    "can_user_submit_form",
]
