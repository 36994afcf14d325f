"""Submission aggregate persisted relationally (submission, answers, files)."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SubmissionAnswer(BaseModel):
    id: Optional[int] = None
    submission_id: Optional[int] = None
    question_id: str
    answer_type: str
    # Plain text, or a JSON array of option ids for choice questions
    answer_text: Optional[str] = None


class SubmissionFile(BaseModel):
    id: Optional[int] = None
    submission_id: Optional[int] = None
    question_id: str
    file_name: str
    file_data: Optional[str] = None
    mime_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    # Populated by reads that join the owning submission and user
    user_id: Optional[int] = None
    username: Optional[str] = None


class Submission(BaseModel):
    id: Optional[int] = None
    form_id: str
    user_id: int
    submitted_at: Optional[datetime] = None
    username: Optional[str] = None
    answers: List[SubmissionAnswer] = Field(default_factory=list)
    files: List[SubmissionFile] = Field(default_factory=list)


__all__ = ["SubmissionAnswer", "SubmissionFile", "Submission"]
