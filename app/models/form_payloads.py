"""Pydantic models for form authoring payloads.

Options arrive as an ordered list of labels; ids for options are assigned
server-side by the option reconciler, never taken from the client.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class FormConfigPayload(BaseModel):
    allow_multiple_submissions: bool = False


class FormQuestionPayload(BaseModel):
    # Absent/empty for new questions; existing question ids keep their options
    id: Optional[str] = None
    type: str
    label: str = ""
    is_required: bool = False
    is_description: bool = False
    is_multi_select: bool = False
    date_format: Optional[str] = None
    order: int = 0
    options: Optional[List[str]] = None
    allowed_types: Optional[List[str]] = None


class CreateFormPayload(BaseModel):
    title: str
    description: str = ""
    header: str = ""
    header_description: str = ""
    config: Optional[FormConfigPayload] = None
    questions: Optional[List[FormQuestionPayload]] = None


class UpdateFormPayload(CreateFormPayload):
    # "draft" or "publish" (case-insensitive); None means "draft"
    mode: Optional[str] = None


__all__ = [
    "FormConfigPayload",
    "FormQuestionPayload",
    "CreateFormPayload",
    "UpdateFormPayload",
]
