"""Pydantic models for submission payloads."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FileUploadPayload(BaseModel):
    file_name: str
    # Base64 encoded file content
    file_data: str = ""
    mime_type: Optional[str] = None


class SubmissionAnswerPayload(BaseModel):
    question_id: str
    # Client-reported only; the form question's type decides normalization
    answer_type: Optional[str] = None
    answer_text: Optional[str] = None
    selected_option_ids: Optional[List[str]] = None
    file: Optional[FileUploadPayload] = None


class SubmitFormPayload(BaseModel):
    form_id: str
    answers: List[SubmissionAnswerPayload] = Field(default_factory=list)


__all__ = ["FileUploadPayload", "SubmissionAnswerPayload", "SubmitFormPayload"]
