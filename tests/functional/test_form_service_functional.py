"""Functional tests for form service operations with a patched form store."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.logic import form_service
from app.logic.errors import AlreadyPublished, DeleteBlocked, EditBlocked, InvalidState, NotFound
from app.models.form import Form, FormConfig
from app.models.form_payloads import CreateFormPayload, FormQuestionPayload, UpdateFormPayload

_NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)
_REPO_FORMS = "app.logic.repository_forms"
_REPO_SUBS = "app.logic.repository_submissions"


def _form(status="draft", allow_multiple=False) -> Form:
    return Form(
        id="f1",
        title="Survey",
        status=status,
        created_at=_NOW,
        config=FormConfig(allow_multiple_submissions=allow_multiple),
    )


def test_create_form_persists_draft(mocker):
    create = mocker.patch(f"{_REPO_FORMS}.create_form", side_effect=lambda f: f)
    payload = CreateFormPayload(
        title="Survey",
        questions=[FormQuestionPayload(type="dropdown", label="Pick", options=["Yes", "No"])],
    )
    response = form_service.create_form(payload, created_by="admin")
    create.assert_called_once()
    assert response.status == "draft"
    assert [o.value for o in response.questions[0].options] == ["Yes", "No"]


def test_get_form_not_found(mocker):
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=None)
    with pytest.raises(NotFound) as exc:
        form_service.get_form("missing")
    assert exc.value.message == "Form not found"


def test_publish_form_writes_published_aggregate(mocker):
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=_form())
    store = mocker.patch(f"{_REPO_FORMS}.publish_form", return_value=True)
    response = form_service.publish_form("f1", published_by="admin")
    assert response.status == "published"
    assert response.published_by == "admin"
    assert store.call_args.args[1].status == "published"


def test_publish_already_published_does_not_write(mocker):
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=_form(status="PUBLISHED"))
    store = mocker.patch(f"{_REPO_FORMS}.publish_form")
    with pytest.raises(AlreadyPublished):
        form_service.publish_form("f1")
    store.assert_not_called()


def test_update_published_form_in_draft_mode_blocked(mocker):
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=_form(status="published"))
    store = mocker.patch(f"{_REPO_FORMS}.update_form")
    with pytest.raises(EditBlocked):
        form_service.update_form("f1", UpdateFormPayload(title="x"))
    store.assert_not_called()


def test_update_in_publish_mode_publishes(mocker):
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=_form())
    store = mocker.patch(f"{_REPO_FORMS}.update_form", return_value=True)
    response = form_service.update_form("f1", UpdateFormPayload(title="x", mode="publish"), updated_by="admin")
    assert response.status == "published"
    assert response.title == "x"
    assert store.call_args.args[1].published_by == "admin"


def test_publish_and_update_raise_not_found_when_write_misses(mocker):
    """Verifies a write that matches no row surfaces as NotFound, not success."""
    # Arrange
    mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=_form())
    mocker.patch(f"{_REPO_FORMS}.publish_form", return_value=False)
    mocker.patch(f"{_REPO_FORMS}.update_form", return_value=False)
    # Act / Assert
    with pytest.raises(NotFound) as published:
        form_service.publish_form("f1", published_by="admin")
    assert published.value.message == "Form not found"
    with pytest.raises(NotFound):
        form_service.update_form("f1", UpdateFormPayload(title="x"))


def test_delete_form_paths(mocker):
    get = mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=None)
    delete = mocker.patch(f"{_REPO_FORMS}.delete_form", return_value=True)
    with pytest.raises(NotFound):
        form_service.delete_form("f1")
    get.return_value = _form(status="Published")
    with pytest.raises(DeleteBlocked):
        form_service.delete_form("f1")
    delete.assert_not_called()
    get.return_value = _form()
    form_service.delete_form("f1")
    delete.assert_called_once_with("f1")
    delete.return_value = False
    with pytest.raises(InvalidState) as exc:
        form_service.delete_form("f1")
    assert exc.value.message == "Failed to delete form"


def test_can_user_submit_form(mocker):
    get = mocker.patch(f"{_REPO_FORMS}.get_form_by_id", return_value=None)
    submitted = mocker.patch(f"{_REPO_SUBS}.has_user_submitted_form", return_value=False)
    assert form_service.can_user_submit_form("f1", 5) is False
    get.return_value = _form()
    assert form_service.can_user_submit_form("f1", 5) is False
    get.return_value = _form(status="published")
    assert form_service.can_user_submit_form("f1", 5) is True
    submitted.return_value = True
    assert form_service.can_user_submit_form("f1", 5) is False
    get.return_value = _form(status="published", allow_multiple=True)
    assert form_service.can_user_submit_form("f1", 5) is True
