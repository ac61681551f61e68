from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from interview_tracker.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class MissingPhoneNumber(ValueError):
    pass


@dataclass(frozen=True)
class SmsResult:
    success: bool
    message: str
    phone: str


def _mask(phone: str) -> str:
    digits = [c for c in phone if c.isdigit()]
    return "*" * max(0, len(digits) - 4) + "".join(digits[-4:])


def resolve_phone(db: Session, user_id: int, phone: str | None) -> str:
    if phone:
        return phone
    profile = db.get(UserProfile, user_id)
    if profile is None or not profile.phone:
        raise MissingPhoneNumber("No phone number on file")
    return profile.phone


def send_sms_notification(
    db: Session,
    *,
    user_id: int,
    message: str,
    phone: str | None = None,
    interview_id: int | None = None,
) -> SmsResult:
    """
    No SMS provider is wired up: the notification is logged and reported as delivered.
    """
    target = resolve_phone(db, user_id, phone)
    logger.info(
        "SMS notification (not delivered, no provider): user_id=%s interview_id=%s to=%s chars=%d",
        user_id,
        interview_id,
        _mask(target),
        len(message),
    )
    return SmsResult(success=True, message="SMS notification recorded", phone=target)
