"""Form aggregate stored as one JSON document per form."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FormStatus:
    DRAFT = "draft"
    PUBLISHED = "published"


class QuestionOption(BaseModel):
    id: str
    value: str
    order: int = 0
    # Soft-delete flag; inactive options stay stored for historical answers
    is_active: bool = True


class FormQuestion(BaseModel):
    id: str
    type: str
    label: str = ""
    is_required: bool = False
    is_description: bool = False
    is_multi_select: bool = False
    date_format: Optional[str] = None
    order: int = 0
    options: List[QuestionOption] = Field(default_factory=list)
    allowed_types: List[str] = Field(default_factory=list)


class FormConfig(BaseModel):
    allow_multiple_submissions: bool = False


class Form(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    header: str = ""
    header_description: str = ""
    status: str = FormStatus.DRAFT
    config: FormConfig = Field(default_factory=FormConfig)
    created_at: datetime
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    published_at: Optional[datetime] = None
    published_by: Optional[str] = None
    questions: List[FormQuestion] = Field(default_factory=list)


__all__ = ["FormStatus", "QuestionOption", "FormQuestion", "FormConfig", "Form"]
