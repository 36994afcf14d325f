"""Pydantic models for response bodies."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.models.form import FormConfig


class OptionResponse(BaseModel):
    id: str
    value: str
    order: int


class QuestionResponse(BaseModel):
    id: str
    type: str
    label: str
    is_required: bool
    is_description: bool
    is_multi_select: bool
    date_format: Optional[str] = None
    order: int
    # None means "not applicable / nothing active", never an empty list
    options: Optional[List[OptionResponse]] = None
    allowed_types: List[str]


class FormResponse(BaseModel):
    id: str
    title: str
    description: str
    header: str
    header_description: str
    status: str
    config: FormConfig
    created_at: datetime
    published_at: Optional[datetime] = None
    published_by: Optional[str] = None
    questions: List[QuestionResponse]


class FileResponse(BaseModel):
    id: Optional[int] = None
    file_name: str
    mime_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    file_size_bytes: int = 0


class AnswerResponse(BaseModel):
    question_id: str
    question_label: str
    answer_type: str
    answer_text: Optional[str] = None
    selected_option_ids: Optional[List[str]] = None
    file: Optional[FileResponse] = None


class SubmissionResponse(BaseModel):
    id: Optional[int] = None
    form_id: str
    form_title: str
    user_id: int
    username: str
    submitted_at: Optional[datetime] = None
    answers: List[AnswerResponse]


class SubmissionSummary(BaseModel):
    submission_id: int
    form_id: str
    form_title: str
    form_status: str
    submitted_at: Optional[datetime] = None
    total_questions: int
    answered_questions: int


class MySubmissions(BaseModel):
    total_submissions: int
    submissions: List[SubmissionSummary]


class FileInfo(BaseModel):
    id: int
    submission_id: Optional[int] = None
    question_id: str
    question_label: str
    file_name: str
    mime_type: Optional[str] = None
    file_size_bytes: int
    uploaded_at: Optional[datetime] = None
    user_id: Optional[int] = None
    submitted_by: str


class FormFiles(BaseModel):
    form_id: str
    form_title: str
    total_files: int
    files: List[FileInfo]


class FileDownload(BaseModel):
    file_name: str
    mime_type: Optional[str] = None
    file_data: str
    file_bytes: bytes


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str


class AuthResult(BaseModel):
    user: UserResponse
    token: str


class AuthStatus(BaseModel):
    status: str
    message: str
    user: Optional[UserResponse] = None


__all__ = [
    "OptionResponse",
    "QuestionResponse",
    "FormResponse",
    "FileResponse",
    "AnswerResponse",
    "SubmissionResponse",
    "SubmissionSummary",
    "MySubmissions",
    "FileInfo",
    "FormFiles",
    "FileDownload",
    "UserResponse",
    "AuthResult",
    "AuthStatus",
]
