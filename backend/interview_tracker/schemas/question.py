from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from interview_tracker.schemas.interview import RequiredText


class QuestionGenerateIn(BaseModel):
    company: RequiredText
    role: RequiredText
    page: int = Field(default=1, ge=1, le=50)


class QuestionOut(BaseModel):
    id: Optional[int] = None
    question: str
    answer: str
    example: Optional[str] = None
    type: str = "general"

    model_config = ConfigDict(from_attributes=True)


class QuestionPageOut(BaseModel):
    questions: list[QuestionOut]
    page: int
    has_more: bool
    from_cache: bool
    fallback: bool = False
