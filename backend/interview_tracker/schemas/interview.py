from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from interview_tracker.core.timeutils import as_utc
from interview_tracker.models.interview import InterviewStatus

_SALARY_RE = re.compile(r"^\d+(\.\d+)?$")


def _clean_salary(value: str) -> str:
    v = value.strip()
    if not _SALARY_RE.match(v):
        raise ValueError("Salary must be a number, e.g. 18 or 18.5")
    return v


def _clean_required(value: str) -> str:
    v = value.strip()
    if not v:
        raise ValueError("Field is required")
    return v


RequiredText = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_clean_required)]
Salary = Annotated[str, Field(min_length=1, max_length=50), AfterValidator(_clean_salary)]
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class InterviewCreate(BaseModel):
    company_name: RequiredText
    role: RequiredText
    salary: Salary
    scheduled_at: UtcDatetime
    status: InterviewStatus = InterviewStatus.UPCOMING
    notes: Optional[str] = None


class InterviewUpdate(BaseModel):
    company_name: Optional[RequiredText] = None
    role: Optional[RequiredText] = None
    salary: Optional[Salary] = None
    scheduled_at: Optional[UtcDatetime] = None
    status: Optional[InterviewStatus] = None
    notes: Optional[str] = None


class InterviewOutcomeIn(BaseModel):
    outcome: Literal["succeeded", "rejected"]


class InterviewOut(BaseModel):
    id: int
    company_name: str
    role: str
    salary: str
    scheduled_at: UtcDatetime
    status: InterviewStatus
    notes: Optional[str] = None
    has_rating: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
