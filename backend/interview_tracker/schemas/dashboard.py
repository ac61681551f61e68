from __future__ import annotations

from pydantic import BaseModel

from interview_tracker.schemas.interview import InterviewOut


class StatusCountsOut(BaseModel):
    upcoming: int = 0
    completed: int = 0
    succeeded: int = 0
    rejected: int = 0
    total: int = 0


class DashboardOut(BaseModel):
    counts: StatusCountsOut
    upcoming: list[InterviewOut]
    rejected: list[InterviewOut]
    awaiting_rating: list[InterviewOut]
    has_ratings: bool
    overall_average: float
