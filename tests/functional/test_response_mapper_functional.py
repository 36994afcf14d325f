"""Functional tests for projecting stored aggregates into response models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.logic.response_mapper import (
    base64_size,
    to_file_infos,
    to_form_response,
    to_submission_response,
    to_submission_summary,
)
from app.models.form import Form, FormQuestion, QuestionOption
from app.models.submission import Submission, SubmissionAnswer, SubmissionFile
from app.models.user import User

_NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _form(*questions: FormQuestion) -> Form:
    return Form(id="f1", title="Survey", created_at=_NOW, questions=list(questions))


@pytest.mark.parametrize(
    "data,expected",
    [
        ("YmFzZTY0ZGF0YQ==", 10),
        ("YmFzZTY0ZGF0YQo=", 11),
        ("", 0),
        (None, 0),
    ],
)
def test_base64_size(data, expected):
    assert base64_size(data) == expected


def test_text_question_with_stored_options_maps_to_null_options():
    """Verifies options are gated by question type, not by presence."""
    q = FormQuestion(id="q1", type="text", label="T", options=[QuestionOption(id="o1", value="x")])
    response = to_form_response(_form(q))
    assert response.questions[0].options is None


def test_only_active_options_are_emitted_and_renumbered():
    q = FormQuestion(
        id="q1",
        type="Checkbox",
        label="C",
        options=[
            QuestionOption(id="o3", value="c", order=2),
            QuestionOption(id="o1", value="a", order=0, is_active=False),
            QuestionOption(id="o2", value="b", order=1),
        ],
    )
    options = to_form_response(_form(q)).questions[0].options
    assert [(o.id, o.order) for o in options] == [("o2", 0), ("o3", 1)]


def test_choice_question_without_active_options_maps_to_null():
    q = FormQuestion(id="q1", type="radio", label="R", options=[QuestionOption(id="o1", value="a", is_active=False)])
    assert to_form_response(_form(q)).questions[0].options is None


def test_submission_response_resolves_labels_and_fallbacks():
    """Verifies unknown question, form and user degrade to placeholder labels."""
    form = _form(FormQuestion(id="q1", type="dropdown", label="Colour"))
    submission = Submission(
        id=7,
        form_id="f1",
        user_id=3,
        submitted_at=_NOW,
        answers=[
            SubmissionAnswer(question_id="q1", answer_type="dropdown", answer_text='["o1"]'),
            SubmissionAnswer(question_id="gone", answer_type="text", answer_text="hello"),
        ],
    )
    # Act
    with_form = to_submission_response(submission, form, User(id=3, username="ann", email="a@x", password_hash="h"))
    orphan = to_submission_response(submission, None, None)
    # Assert
    assert with_form.form_title == "Survey"
    assert with_form.username == "ann"
    assert with_form.answers[0].selected_option_ids == ["o1"]
    assert with_form.answers[0].answer_text is None
    assert with_form.answers[0].question_label == "Colour"
    assert with_form.answers[1].question_label == "Unknown Question"
    assert with_form.answers[1].answer_text == "hello"
    assert orphan.form_title == "Unknown Form"
    assert orphan.username == "Unknown User"


def test_unparseable_choice_answer_text_is_kept_raw():
    form = _form(FormQuestion(id="q1", type="radio", label="R"))
    submission = Submission(
        form_id="f1",
        user_id=1,
        answers=[SubmissionAnswer(question_id="q1", answer_type="radio", answer_text="not-json")],
    )
    answer = to_submission_response(submission, form, None).answers[0]
    assert answer.selected_option_ids is None
    assert answer.answer_text == "not-json"


def test_file_rows_become_file_answers_with_size():
    form = _form(FormQuestion(id="qf", type="file", label="Upload"))
    submission = Submission(
        id=1,
        form_id="f1",
        user_id=1,
        files=[SubmissionFile(id=4, question_id="qf", file_name="a.txt", file_data="YmFzZTY0ZGF0YQ==", mime_type="text/plain")],
    )
    response = to_submission_response(submission, form, None)
    answer = response.answers[0]
    assert answer.answer_type == "file"
    assert answer.question_label == "Upload"
    assert answer.file.id == 4
    assert answer.file.file_size_bytes == 10


def test_summary_counts_answers_and_files():
    form = _form(FormQuestion(id="q1", type="text"), FormQuestion(id="q2", type="file"), FormQuestion(id="q3", type="text"))
    submission = Submission(
        id=2,
        form_id="f1",
        user_id=1,
        answers=[SubmissionAnswer(question_id="q1", answer_type="text", answer_text="x")],
        files=[SubmissionFile(question_id="q2", file_name="f")],
    )
    summary = to_submission_summary(submission, form)
    assert summary.total_questions == 3
    assert summary.answered_questions == 2


def test_file_infos_fallbacks():
    infos = to_file_infos(
        [SubmissionFile(id=1, submission_id=2, question_id="missing", file_name="a", file_data="")],
        None,
    )
    assert infos[0].question_label == "Unknown Question"
    assert infos[0].submitted_by == "Unknown User"
    assert infos[0].file_size_bytes == 0
