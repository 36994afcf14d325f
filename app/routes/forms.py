"""Form authoring endpoints.

Write operations require the Admin role; reads are open to any
authenticated user.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from app.guards.auth import Principal, get_principal, require_admin
from app.logic import form_service
from app.models.form_payloads import CreateFormPayload, UpdateFormPayload
from app.models.response_types import FormResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/forms",
    summary="Create a draft form",
    operation_id="createForm",
    tags=["Forms"],
    status_code=201,
    response_model=FormResponse,
)
def create_form(payload: CreateFormPayload, principal: Principal = Depends(require_admin)) -> FormResponse:
    return form_service.create_form(payload, created_by=principal.username)


@router.get(
    "/api/forms",
    summary="List forms",
    operation_id="listForms",
    tags=["Forms"],
    response_model=list[FormResponse],
)
def list_forms(principal: Principal = Depends(get_principal)) -> list[FormResponse]:
    return form_service.list_forms()


@router.get(
    "/api/forms/{form_id}",
    summary="Get a form",
    operation_id="getForm",
    tags=["Forms"],
    response_model=FormResponse,
)
def get_form(form_id: str, principal: Principal = Depends(get_principal)) -> FormResponse:
    return form_service.get_form(form_id)


@router.post(
    "/api/forms/{form_id}/publish",
    summary="Publish a draft form",
    operation_id="publishForm",
    tags=["Forms"],
    response_model=FormResponse,
)
def publish_form(form_id: str, principal: Principal = Depends(require_admin)) -> FormResponse:
    return form_service.publish_form(form_id, published_by=principal.username)


@router.put(
    "/api/forms/{form_id}",
    summary="Edit a form (mode: draft or publish)",
    operation_id="updateForm",
    tags=["Forms"],
    response_model=FormResponse,
)
def update_form(
    form_id: str,
    payload: UpdateFormPayload,
    principal: Principal = Depends(require_admin),
) -> FormResponse:
    return form_service.update_form(form_id, payload, updated_by=principal.username)


@router.delete(
    "/api/forms/{form_id}",
    summary="Delete a draft form",
    operation_id="deleteForm",
    tags=["Forms"],
    status_code=204,
)
def delete_form(form_id: str, principal: Principal = Depends(require_admin)) -> Response:
    form_service.delete_form(form_id)
    return Response(status_code=204)


@router.get(
    "/api/forms/{form_id}/can-submit",
    summary="Whether the caller may submit the form",
    operation_id="canSubmitForm",
    tags=["Forms"],
)
def can_submit(form_id: str, principal: Principal = Depends(get_principal)) -> dict:
    return {"form_id": form_id, "can_submit": form_service.can_user_submit_form(form_id, principal.user_id)}


__all__ = ["router"]
