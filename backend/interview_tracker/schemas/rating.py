from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

Score = Annotated[int, Field(ge=1, le=5)]


class RatingCreate(BaseModel):
    technical: Score
    managerial: Score
    projects: Score
    self_introduction: Score
    hr_round: Score
    dressup: Score
    communication: Score
    body_language: Score
    punctuality: Score
    feedback: Optional[str] = Field(default=None, max_length=5000)


class RatingOut(BaseModel):
    id: int
    interview_id: int
    technical: int
    managerial: int
    projects: int
    self_introduction: int
    hr_round: int
    dressup: int
    communication: int
    body_language: int
    punctuality: int
    overall_rating: float
    feedback: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryScoreOut(BaseModel):
    category: str
    label: str
    score: float


class ImprovementOut(CategoryScoreOut):
    suggestion: str


class RatingSummaryOut(BaseModel):
    count: int
    overall_average: float
    category_averages: dict[str, float]
    strengths: list[CategoryScoreOut]
    improvements: list[ImprovementOut]
