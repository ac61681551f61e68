from __future__ import annotations

import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

_PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")


def validate_phone(value: str) -> str:
    v = value.strip()
    if not _PHONE_RE.match(v):
        raise ValueError("Please enter a valid phone number")
    return v


Phone = Annotated[str, Field(max_length=32), AfterValidator(validate_phone)]


def _clean_message(value: str) -> str:
    v = value.strip()
    if not v:
        raise ValueError("Message is required")
    return v


class ProfileOut(BaseModel):
    phone: Optional[str] = None


class ProfileUpdateIn(BaseModel):
    phone: Phone


class SmsNotificationIn(BaseModel):
    message: Annotated[str, Field(min_length=1, max_length=480), AfterValidator(_clean_message)]
    phone: Optional[Phone] = None
    interview_id: Optional[int] = None


class SmsNotificationOut(BaseModel):
    success: bool
    message: str
