"""Projection of stored aggregates into response models.

Display mapping never raises for dangling references: a question removed
after submission, a deleted form or a deleted user degrade to placeholder
labels.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from app.models.form import Form, FormQuestion
from app.models.question_kind import is_choice_kind, is_file_kind, normalize_kind
from app.models.response_types import (
    AnswerResponse,
    FileInfo,
    FileResponse,
    FormResponse,
    OptionResponse,
    QuestionResponse,
    SubmissionResponse,
    SubmissionSummary,
    UserResponse,
)
from app.models.submission import Submission, SubmissionFile
from app.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_QUESTION = "Unknown Question"
UNKNOWN_FORM = "Unknown Form"
UNKNOWN_USER = "Unknown User"


def base64_size(data: Optional[str]) -> int:
    """Decoded byte size of a base64 payload: floor(len*3/4) - padding."""
    if not data:
        return 0
    padding = 0
    if data.endswith("=="):
        padding = 2
    elif data.endswith("="):
        padding = 1
    return (len(data) * 3) // 4 - padding


def _options_for(question: FormQuestion) -> Optional[list[OptionResponse]]:
    if not is_choice_kind(question.type):
        return None
    active = sorted((o for o in question.options if o.is_active), key=lambda o: o.order)
    # A choice question whose options are all inactive maps to null, never to []
    if not active:
        return None
    return [OptionResponse(id=o.id, value=o.value, order=i) for i, o in enumerate(active)]


def to_question_response(question: FormQuestion) -> QuestionResponse:
    return QuestionResponse(
        id=question.id,
        type=question.type,
        label=question.label,
        is_required=question.is_required,
        is_description=question.is_description,
        is_multi_select=question.is_multi_select,
        date_format=question.date_format,
        order=question.order,
        options=_options_for(question),
        allowed_types=list(question.allowed_types or []),
    )


def to_form_response(form: Form) -> FormResponse:
    return FormResponse(
        id=form.id,
        title=form.title,
        description=form.description,
        header=form.header,
        header_description=form.header_description,
        status=form.status,
        config=form.config,
        created_at=form.created_at,
        published_at=form.published_at,
        published_by=form.published_by,
        questions=[to_question_response(q) for q in form.questions],
    )


def question_labels(form: Optional[Form]) -> dict[str, str]:
    if form is None:
        return {}
    return {q.id: q.label for q in form.questions}


def _question_types(form: Optional[Form]) -> dict[str, str]:
    if form is None:
        return {}
    return {q.id: q.type for q in form.questions}


def _decode_selected(answer_text: Optional[str]) -> Optional[list[str]]:
    if not answer_text:
        return None
    try:
        decoded = json.loads(answer_text)
    except ValueError:
        return None
    if not isinstance(decoded, list):
        return None
    return [str(v) for v in decoded]


def to_file_response(file: SubmissionFile) -> FileResponse:
    return FileResponse(
        id=file.id,
        file_name=file.file_name,
        mime_type=file.mime_type,
        uploaded_at=file.uploaded_at,
        file_size_bytes=base64_size(file.file_data),
    )


def to_submission_response(
    submission: Submission,
    form: Optional[Form],
    user: Optional[User],
) -> SubmissionResponse:
    labels = question_labels(form)
    types = _question_types(form)
    answers: list[AnswerResponse] = []
    for a in submission.answers:
        declared = types.get(a.question_id, a.answer_type)
        selected = _decode_selected(a.answer_text) if is_choice_kind(declared) else None
        answers.append(
            AnswerResponse(
                question_id=a.question_id,
                question_label=labels.get(a.question_id, UNKNOWN_QUESTION),
                answer_type=normalize_kind(a.answer_type) or normalize_kind(declared),
                answer_text=None if selected is not None else a.answer_text,
                selected_option_ids=selected,
            )
        )
    for f in submission.files:
        answers.append(
            AnswerResponse(
                question_id=f.question_id,
                question_label=labels.get(f.question_id, UNKNOWN_QUESTION),
                answer_type="file",
                file=to_file_response(f),
            )
        )
    username = user.username if user is not None else (submission.username or UNKNOWN_USER)
    return SubmissionResponse(
        id=submission.id,
        form_id=submission.form_id,
        form_title=form.title if form is not None else UNKNOWN_FORM,
        user_id=submission.user_id,
        username=username,
        submitted_at=submission.submitted_at,
        answers=answers,
    )


def to_submission_summary(submission: Submission, form: Form) -> SubmissionSummary:
    return SubmissionSummary(
        submission_id=submission.id,
        form_id=submission.form_id,
        form_title=form.title,
        form_status=form.status,
        submitted_at=submission.submitted_at,
        total_questions=len(form.questions),
        answered_questions=len(submission.answers) + len(submission.files),
    )


def to_file_infos(files: Iterable[SubmissionFile], form: Optional[Form]) -> list[FileInfo]:
    labels = question_labels(form)
    return [
        FileInfo(
            id=f.id,
            submission_id=f.submission_id,
            question_id=f.question_id,
            question_label=labels.get(f.question_id, UNKNOWN_QUESTION),
            file_name=f.file_name,
            mime_type=f.mime_type,
            file_size_bytes=base64_size(f.file_data),
            uploaded_at=f.uploaded_at,
            user_id=f.user_id,
            submitted_by=f.username or UNKNOWN_USER,
        )
        for f in files
    ]


def to_user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, username=user.username, email=user.email, role=user.role)


__all__ = [
    "UNKNOWN_QUESTION",
    "UNKNOWN_FORM",
    "UNKNOWN_USER",
    "base64_size",
    "to_question_response",
    "to_form_response",
    "to_file_response",
    "to_submission_response",
    "to_submission_summary",
    "to_file_infos",
    "to_user_response",
    "question_labels",
]
