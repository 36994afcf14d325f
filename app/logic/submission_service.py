"""Submission validation, recording and read-side queries.

`submit_form` checks its preconditions in a fixed order and touches the
submission store for writing only after every check has passed. Answers are
normalized by the form question's declared type; the type the client
reports is ignored.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from app.logic import form_lifecycle, repository_forms, repository_submissions, repository_users
from app.logic.errors import (
    DuplicateSubmission,
    InvalidArgument,
    NotFound,
    NotPublished,
    Unauthorized,
    UnknownQuestion,
)
from app.logic.response_mapper import (
    to_file_infos,
    to_submission_response,
    to_submission_summary,
)
from app.models.form import Form, FormQuestion
from app.models.question_kind import is_choice_kind, is_file_kind, normalize_kind
from app.models.response_types import (
    FileDownload,
    FileInfo,
    FormFiles,
    MySubmissions,
    SubmissionResponse,
)
from app.models.submission import Submission, SubmissionAnswer, SubmissionFile
from app.models.submission_payloads import SubmissionAnswerPayload, SubmitFormPayload

logger = logging.getLogger(__name__)


def _selected_ids(answer: SubmissionAnswerPayload) -> list[str]:
    if answer.selected_option_ids is not None:
        return [str(i) for i in answer.selected_option_ids]
    if answer.answer_text:
        return [answer.answer_text]
    return []


def normalize_answer(
    question: FormQuestion,
    answer: SubmissionAnswerPayload,
    now: datetime,
) -> tuple[Optional[SubmissionAnswer], Optional[SubmissionFile]]:
    """Return the (answer row, file row) pair to store for one answer."""
    kind = normalize_kind(question.type)
    if is_file_kind(kind):
        if answer.file is None:
            return None, None
        return None, SubmissionFile(
            question_id=question.id,
            file_name=answer.file.file_name,
            file_data=answer.file.file_data,
            mime_type=answer.file.mime_type,
            uploaded_at=now,
        )
    if is_choice_kind(kind):
        # Radio answers are stored as a one-element array too
        text = json.dumps(_selected_ids(answer), separators=(",", ":"))
    else:
        text = answer.answer_text or ""
    return SubmissionAnswer(question_id=question.id, answer_type=kind, answer_text=text), None


def submit_form(payload: SubmitFormPayload, user_id: int) -> SubmissionResponse:
    form = repository_forms.get_form_by_id(payload.form_id)
    if form is None:
        raise NotFound("Form not found")
    if not form_lifecycle.is_published(form):
        raise NotPublished("Form is not published. Only published forms can be submitted.")
    single = not form.config.allow_multiple_submissions
    if single and repository_submissions.has_user_submitted_form(user_id, payload.form_id):
        logger.info(
            "submission_rejected",
            extra={"form_id": payload.form_id, "user_id": user_id, "reason": "duplicate"},
        )
        raise DuplicateSubmission("You have already submitted this form. Multiple submissions are not allowed.")
    user = repository_users.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")

    questions = {q.id: q for q in form.questions}
    for a in payload.answers:
        if a.question_id not in questions:
            logger.info(
                "submission_rejected",
                extra={"form_id": payload.form_id, "user_id": user_id, "question_id": a.question_id},
            )
            raise UnknownQuestion(a.question_id)

    now = datetime.now(timezone.utc)
    submission = Submission(form_id=form.id, user_id=user_id, submitted_at=now, username=user.username)
    for a in payload.answers:
        row, file = normalize_answer(questions[a.question_id], a, now)
        if row is not None:
            submission.answers.append(row)
        if file is not None:
            submission.files.append(file)

    submission_id = repository_submissions.create_submission(submission, exclusive=single)
    if submission_id is None:
        raise DuplicateSubmission("You have already submitted this form. Multiple submissions are not allowed.")
    submission.id = submission_id
    logger.info(
        "submission_created",
        extra={
            "submission_id": submission_id,
            "form_id": form.id,
            "user_id": user_id,
            "answers": len(submission.answers),
            "files": len(submission.files),
        },
    )
    return to_submission_response(submission, form, user)


def has_user_submitted_form(user_id: int, form_id: str) -> bool:
    return repository_submissions.has_user_submitted_form(user_id, form_id)


def get_my_submissions(user_id: int) -> MySubmissions:
    summaries = []
    forms: dict[str, Optional[Form]] = {}
    for s in repository_submissions.get_submissions_by_user_id(user_id):
        if s.form_id not in forms:
            forms[s.form_id] = repository_forms.get_form_by_id(s.form_id)
        form = forms[s.form_id]
        if form is None:
            continue
        summaries.append(to_submission_summary(s, form))
    return MySubmissions(total_submissions=len(summaries), submissions=summaries)


def _can_access(owner_id: Optional[int], user_id: Optional[int], is_admin: bool) -> bool:
    return user_id is None or is_admin or owner_id == user_id


def get_submission_details(submission_id: int, user_id: Optional[int] = None, is_admin: bool = False) -> SubmissionResponse:
    submission = repository_submissions.get_submission_by_id(submission_id)
    if submission is None:
        raise NotFound("Submission not found")
    if not _can_access(submission.user_id, user_id, is_admin):
        raise Unauthorized("You don't have permission to view this submission")
    form = repository_forms.get_form_by_id(submission.form_id)
    user = repository_users.get_by_id(submission.user_id)
    return to_submission_response(submission, form, user)


def get_form_submissions(form_id: str) -> list[SubmissionResponse]:
    form = repository_forms.get_form_by_id(form_id)
    return [
        to_submission_response(s, form, None)
        for s in repository_submissions.get_submissions_by_form_id(form_id)
    ]


def get_form_files(form_id: str, user_id: Optional[int] = None, is_admin: bool = False) -> FormFiles:
    """List every uploaded file for a form.

    Learners may list a form's files only once they have submitted it.
    """
    form = repository_forms.get_form_by_id(form_id)
    if form is None:
        raise NotFound("Form not found")
    if user_id is not None and not is_admin:
        if not repository_submissions.has_user_submitted_form(user_id, form_id):
            raise Unauthorized("You don't have permission to view files for this form")
    files = to_file_infos(repository_submissions.get_files_by_form_id(form_id), form)
    return FormFiles(form_id=form.id, form_title=form.title, total_files=len(files), files=files)


def get_file_for_download(file_id: int, user_id: Optional[int] = None, is_admin: bool = False) -> FileDownload:
    file = repository_submissions.get_file_by_id(file_id)
    if file is None:
        raise NotFound("File not found")
    if not _can_access(file.user_id, user_id, is_admin):
        raise Unauthorized("You don't have permission to download this file")
    data = file.file_data or ""
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidArgument("Stored file content is not valid base64") from exc
    return FileDownload(file_name=file.file_name, mime_type=file.mime_type, file_data=data, file_bytes=raw)


def get_submission_files(submission_id: int, user_id: Optional[int] = None, is_admin: bool = False) -> list[FileInfo]:
    submission = repository_submissions.get_submission_by_id(submission_id)
    if submission is None:
        raise NotFound("Submission not found")
    if not _can_access(submission.user_id, user_id, is_admin):
        raise Unauthorized("You don't have permission to view these files")
    form = repository_forms.get_form_by_id(submission.form_id)
    return to_file_infos(repository_submissions.get_files_by_submission_id(submission_id), form)


__all__ = [
    "normalize_answer",
    "submit_form",
    "has_user_submitted_form",
    "get_my_submissions",
    "get_submission_details",
    "get_form_submissions",
    "get_form_files",
    "get_file_for_download",
    "get_submission_files",
]
