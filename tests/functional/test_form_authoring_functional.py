"""Functional tests for option reconciliation, form building and the lifecycle."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.logic import form_builder, form_lifecycle
from app.logic.errors import AlreadyPublished, DeleteBlocked, EditBlocked, InvalidMode, InvalidState
from app.logic.option_reconciler import reconcile
from app.models.form import FormStatus, QuestionOption
from app.models.form_payloads import CreateFormPayload, FormQuestionPayload


def _payload(*questions: FormQuestionPayload, title: str = "Survey") -> CreateFormPayload:
    return CreateFormPayload(title=title, questions=list(questions))


def _dropdown(labels, qid=None) -> FormQuestionPayload:
    return FormQuestionPayload(id=qid, type="dropdown", label="Pick one", options=labels)


# -----------------------------
# Option reconciler
# -----------------------------


def test_reconcile_reuses_ids_by_position_and_mints_new():
    """Verifies positional id reuse with a freshly minted id for an appended label."""
    existing = [QuestionOption(id="o1", value="A"), QuestionOption(id="o2", value="B", order=1)]
    # Act
    result = reconcile(existing, ["A2", "B2", "C2"])
    # Assert
    assert [o.id for o in result[:2]] == ["o1", "o2"]
    assert result[2].id not in {"o1", "o2"}
    assert [o.value for o in result] == ["A2", "B2", "C2"]
    assert [o.order for o in result] == [0, 1, 2]
    assert all(o.is_active for o in result)


@pytest.mark.parametrize("labels", [[], None])
def test_reconcile_empty_labels_drop_all_options(labels):
    existing = [QuestionOption(id="o1", value="A"), QuestionOption(id="o2", value="B", order=1)]
    assert reconcile(existing, labels) == []


def test_reconcile_shorter_list_drops_tail_and_reorder_moves_ids():
    """Verifies ids follow positions, not labels."""
    existing = [QuestionOption(id="o1", value="A"), QuestionOption(id="o2", value="B", order=1)]
    result = reconcile(existing, ["B"])
    assert len(result) == 1
    assert result[0].id == "o1"
    assert result[0].value == "B"


def test_reconcile_reactivates_soft_deleted_option():
    existing = [QuestionOption(id="o1", value="A", is_active=False)]
    result = reconcile(existing, ["A"])
    assert result[0].id == "o1" and result[0].is_active is True


# -----------------------------
# Builder
# -----------------------------


def test_build_form_is_draft_with_minted_question_ids():
    payload = _payload(
        FormQuestionPayload(type="text", label="Name", is_required=True),
        _dropdown(["Yes", "No"], qid=""),
    )
    # Act
    form = form_builder.build_form(payload, created_by="admin")
    # Assert
    assert form.status == FormStatus.DRAFT
    assert form.published_at is None and form.published_by is None
    assert form.created_by == "admin"
    assert all(q.id for q in form.questions)
    assert form.questions[0].id != form.questions[1].id
    assert [o.value for o in form.questions[1].options] == ["Yes", "No"]


def test_build_form_keeps_client_question_id():
    form = form_builder.build_form(_payload(FormQuestionPayload(id="q-name", type="text", label="Name")))
    assert form.questions[0].id == "q-name"


def test_non_choice_questions_never_carry_options():
    """Verifies options supplied for text/file/date questions are discarded."""
    payload = _payload(
        FormQuestionPayload(type="text", label="T", options=["x", "y"]),
        FormQuestionPayload(type="date", label="D", options=["x"]),
        FormQuestionPayload(type="file", label="F", options=["x"], allowed_types=None),
    )
    form = form_builder.build_form(payload)
    assert all(q.options == [] for q in form.questions)
    assert form.questions[2].allowed_types == []


def test_choice_type_is_case_insensitive():
    form = form_builder.build_form(_payload(FormQuestionPayload(type="Radio", label="R", options=["a"])))
    assert len(form.questions[0].options) == 1


def test_null_questions_are_empty_list():
    form = form_builder.build_form(CreateFormPayload(title="Empty", questions=None))
    assert form.questions == []


def test_apply_edits_matches_prior_options_by_question_id():
    """Verifies prior options are matched by question id even when questions are reordered."""
    form = form_builder.build_form(
        _payload(_dropdown(["A", "B"], qid="q1"), _dropdown(["X", "Y"], qid="q2"))
    )
    q1_ids = [o.id for o in form.questions[0].options]
    q2_ids = [o.id for o in form.questions[1].options]
    # Act: swap question order and relabel
    edited = form_builder.apply_edits(
        form,
        _payload(_dropdown(["X2", "Y2", "Z2"], qid="q2"), _dropdown(["A2"], qid="q1")),
        updated_by="editor",
    )
    # Assert
    assert [o.id for o in edited.questions[0].options][:2] == q2_ids
    assert [o.id for o in edited.questions[1].options] == q1_ids[:1]
    assert edited.id == form.id
    assert edited.updated_by == "editor"
    assert edited.status == form.status


# -----------------------------
# Lifecycle
# -----------------------------


@pytest.mark.parametrize("stored_status", ["published", "PUBLISHED", "Published"])
def test_publish_when_already_published_fails(stored_status):
    form = form_builder.build_form(_payload()).model_copy(update={"status": stored_status})
    with pytest.raises(AlreadyPublished) as exc:
        form_lifecycle.publish(form, "admin")
    assert isinstance(exc.value, InvalidState)
    assert exc.value.message == "Form is already published"


def test_publish_then_publish_again_fails():
    form = form_builder.build_form(_payload())
    published = form_lifecycle.publish(form, "admin")
    assert published.status == FormStatus.PUBLISHED
    assert published.published_by == "admin"
    assert published.published_at is not None
    with pytest.raises(InvalidState):
        form_lifecycle.publish(published, "admin")


@pytest.mark.parametrize("mode", [None, "", "draft", "DRAFT", " Draft "])
def test_normalize_mode_defaults_to_draft(mode):
    assert form_lifecycle.normalize_mode(mode) == "draft"


def test_invalid_mode_rejected_before_any_edit():
    form = form_builder.build_form(_payload())
    with pytest.raises(InvalidMode) as exc:
        form_lifecycle.edit(form, _payload(title="New"), "archive", "admin")
    assert exc.value.message == "Mode must be either 'draft' or 'publish'"


def test_draft_edit_of_published_form_is_blocked():
    published = form_lifecycle.publish(form_builder.build_form(_payload()), "admin")
    with pytest.raises(EditBlocked) as exc:
        form_lifecycle.edit(published, _payload(title="New"), None, "admin")
    assert "read-only" in exc.value.message


def test_draft_edit_of_draft_form_keeps_status():
    form = form_builder.build_form(_payload())
    edited = form_lifecycle.edit(form, _payload(title="Renamed"), "draft", "admin")
    assert edited.title == "Renamed"
    assert edited.status == FormStatus.DRAFT
    assert edited.published_at is None


def test_publish_mode_refreshes_metadata_even_when_already_published():
    """Verifies edit in publish mode always rewrites the publish metadata."""
    earlier = datetime(2020, 1, 1, tzinfo=timezone.utc)
    published = form_lifecycle.publish(form_builder.build_form(_payload()), "first", now=earlier)
    # Act
    edited = form_lifecycle.edit(published, _payload(title="Again"), "PUBLISH", "second")
    # Assert
    assert edited.status == FormStatus.PUBLISHED
    assert edited.published_by == "second"
    assert edited.published_at > earlier


def test_ensure_deletable():
    form = form_builder.build_form(_payload())
    form_lifecycle.ensure_deletable(form)
    with pytest.raises(DeleteBlocked):
        form_lifecycle.ensure_deletable(form.model_copy(update={"status": "Published"}))
