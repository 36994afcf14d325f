"""Build Form aggregates from authoring payloads.

The builder never persists; it returns the aggregate for the lifecycle and
repository layers to store. Question ids are stable: a payload question
carrying an id keeps it (and its option ids via the reconciler), a
question without one is minted a new id.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, Mapping

from app.logic.option_reconciler import reconcile
from app.models.form import Form, FormConfig, FormQuestion, FormStatus
from app.models.form_payloads import CreateFormPayload, FormQuestionPayload
from app.models.question_kind import is_choice_kind, is_file_kind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_form_id() -> str:
    return str(uuid.uuid4())


def new_question_id() -> str:
    return str(uuid.uuid4())


def build_question(payload: FormQuestionPayload, prior: FormQuestion | None = None) -> FormQuestion:
    question_id = payload.id if payload.id else new_question_id()
    if is_choice_kind(payload.type):
        options = reconcile(prior.options if prior is not None else [], payload.options)
    else:
        options = []
    allowed_types = list(payload.allowed_types or []) if is_file_kind(payload.type) else []
    return FormQuestion(
        id=question_id,
        type=payload.type,
        label=payload.label,
        is_required=payload.is_required,
        is_description=payload.is_description,
        is_multi_select=payload.is_multi_select,
        date_format=payload.date_format,
        order=payload.order,
        options=options,
        allowed_types=allowed_types,
    )


def build_questions(
    payloads: Iterable[FormQuestionPayload] | None,
    prior_by_id: Mapping[str, FormQuestion] | None = None,
) -> list[FormQuestion]:
    prior_by_id = prior_by_id or {}
    questions: list[FormQuestion] = []
    for qp in payloads or []:
        # Prior options are matched by question id, not by position in the form
        prior = prior_by_id.get(qp.id) if qp.id else None
        questions.append(build_question(qp, prior))
    return questions


def build_form(payload: CreateFormPayload, created_by: str | None = None, *, now: datetime | None = None) -> Form:
    """Return a new draft Form for `payload`."""
    config = payload.config
    return Form(
        id=new_form_id(),
        title=payload.title,
        description=payload.description,
        header=payload.header,
        header_description=payload.header_description,
        status=FormStatus.DRAFT,
        config=FormConfig(allow_multiple_submissions=bool(config.allow_multiple_submissions) if config else False),
        created_at=now or _utcnow(),
        created_by=created_by,
        questions=build_questions(payload.questions),
    )


def apply_edits(
    existing_form: Form,
    payload: CreateFormPayload,
    updated_by: str | None = None,
    *,
    now: datetime | None = None,
) -> Form:
    """Return `existing_form` with the payload's content applied.

    Status and publish metadata are left untouched; the lifecycle decides
    those.
    """
    prior_by_id = {q.id: q for q in existing_form.questions}
    config = payload.config
    return existing_form.model_copy(
        update={
            "title": payload.title,
            "description": payload.description,
            "header": payload.header,
            "header_description": payload.header_description,
            "config": FormConfig(allow_multiple_submissions=bool(config.allow_multiple_submissions) if config else False),
            "questions": build_questions(payload.questions, prior_by_id),
            "updated_at": now or _utcnow(),
            "updated_by": updated_by,
        }
    )


__all__ = [
    "build_form",
    "apply_edits",
    "build_question",
    "build_questions",
    "new_form_id",
    "new_question_id",
]
