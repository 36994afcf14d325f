"""Submission endpoints: submit, history, details and file access."""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response

from app.guards.auth import Principal, get_principal, require_admin
from app.logic import submission_service
from app.models.response_types import FileInfo, FormFiles, MySubmissions, SubmissionResponse
from app.models.submission_payloads import SubmitFormPayload

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/submissions",
    summary="Submit answers to a published form",
    operation_id="submitForm",
    tags=["Submissions"],
    status_code=201,
    response_model=SubmissionResponse,
)
def submit_form(payload: SubmitFormPayload, principal: Principal = Depends(get_principal)) -> SubmissionResponse:
    return submission_service.submit_form(payload, principal.user_id)


@router.get(
    "/api/submissions/my",
    summary="List the caller's submissions",
    operation_id="getMySubmissions",
    tags=["Submissions"],
    response_model=MySubmissions,
)
def my_submissions(principal: Principal = Depends(get_principal)) -> MySubmissions:
    return submission_service.get_my_submissions(principal.user_id)


@router.get(
    "/api/submissions/form/{form_id}",
    summary="List all submissions for a form",
    operation_id="getFormSubmissions",
    tags=["Submissions"],
    response_model=list[SubmissionResponse],
)
def form_submissions(form_id: str, principal: Principal = Depends(require_admin)) -> list[SubmissionResponse]:
    return submission_service.get_form_submissions(form_id)


@router.get(
    "/api/submissions/form/{form_id}/files",
    summary="List uploaded files for a form",
    operation_id="getFormFiles",
    tags=["Submissions"],
    response_model=FormFiles,
)
def form_files(form_id: str, principal: Principal = Depends(get_principal)) -> FormFiles:
    return submission_service.get_form_files(form_id, principal.user_id, principal.is_admin)


@router.get(
    "/api/submissions/files/{file_id}",
    summary="Download or preview an uploaded file",
    operation_id="getFile",
    tags=["Submissions"],
)
def download_file(
    file_id: int,
    action: str = Query("download"),
    principal: Principal = Depends(get_principal),
) -> Response:
    download = submission_service.get_file_for_download(file_id, principal.user_id, principal.is_admin)
    disposition = "inline" if action == "preview" else "attachment"
    return Response(
        content=download.file_bytes,
        media_type=download.mime_type or "application/octet-stream",
        headers={"Content-Disposition": f"{disposition}; filename*=UTF-8''{quote(download.file_name)}"},
    )


@router.get(
    "/api/submissions/{submission_id}",
    summary="Get a submission with answers",
    operation_id="getSubmission",
    tags=["Submissions"],
    response_model=SubmissionResponse,
)
def submission_details(submission_id: int, principal: Principal = Depends(get_principal)) -> SubmissionResponse:
    return submission_service.get_submission_details(submission_id, principal.user_id, principal.is_admin)


@router.get(
    "/api/submissions/{submission_id}/files",
    summary="List files uploaded with a submission",
    operation_id="getSubmissionFiles",
    tags=["Submissions"],
    response_model=list[FileInfo],
)
def submission_files(submission_id: int, principal: Principal = Depends(get_principal)) -> list[FileInfo]:
    return submission_service.get_submission_files(submission_id, principal.user_id, principal.is_admin)


__all__ = ["router"]
