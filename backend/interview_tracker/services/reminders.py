from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from html import escape as html_escape
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.core.timeutils import as_utc, utcnow
from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.interview_notification import InterviewNotification, ReminderType
from interview_tracker.services.email import send_email
from interview_tracker.services.users import Recipient, get_user_email

logger = logging.getLogger(__name__)

# (to_email, subject, html) -> provider message id
EmailSender = Callable[..., Optional[str]]


class DispatchOutcome(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ReminderCounts:
    sent: int = 0
    skipped: int = 0
    failed: int = 0

    def add(self, outcome: DispatchOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)


@dataclass
class DispatchReport:
    counts: dict[ReminderType, ReminderCounts] = field(
        default_factory=lambda: {t: ReminderCounts() for t in ReminderType}
    )

    @property
    def total_sent(self) -> int:
        return sum(c.sent for c in self.counts.values())


@dataclass(frozen=True)
class _DueInterview:
    # Plain snapshot: ORM instances are expired by the per-record rollbacks below.
    id: int
    user_id: int
    company_name: str
    role: str
    scheduled_at: datetime

    @classmethod
    def from_interview(cls, iv: Interview) -> "_DueInterview":
        return cls(
            id=iv.id,
            user_id=iv.user_id,
            company_name=iv.company_name,
            role=iv.role,
            scheduled_at=as_utc(iv.scheduled_at),
        )


def reminder_window(reminder_type: ReminderType, now: datetime) -> tuple[datetime, datetime]:
    """[start, end) centered on now + lead time; the tolerance absorbs invocation jitter."""
    target = now + reminder_type.lead_time
    half = timedelta(minutes=settings.REMINDER_WINDOW_MINUTES)
    return target - half, target + half


def find_due_interviews(db: Session, reminder_type: ReminderType, now: datetime) -> list[Interview]:
    start, end = reminder_window(reminder_type, now)
    return (
        db.query(Interview)
        .filter(
            Interview.status == InterviewStatus.UPCOMING.value,
            Interview.scheduled_at >= start,
            Interview.scheduled_at < end,
        )
        .order_by(Interview.scheduled_at, Interview.id)
        .all()
    )


def already_notified(db: Session, interview_id: int, reminder_type: ReminderType) -> bool:
    return (
        db.query(InterviewNotification.id)
        .filter(
            InterviewNotification.interview_id == interview_id,
            InterviewNotification.notification_type == reminder_type.value,
        )
        .first()
        is not None
    )


def render_reminder_email(
    *,
    company_name: str,
    role: str,
    scheduled_at: datetime,
    recipient_name: str,
    reminder_type: ReminderType,
) -> tuple[str, str]:
    when = as_utc(scheduled_at)
    time_text = reminder_type.label
    subject = f"Interview Reminder: {company_name} - {time_text}"
    html = f"""
<h2>Interview Reminder</h2>
<p>Hi {html_escape(recipient_name)},</p>
<p>This is a reminder that you have an interview {time_text}:</p>
<ul>
  <li><strong>Company:</strong> {html_escape(company_name)}</li>
  <li><strong>Role:</strong> {html_escape(role)}</li>
  <li><strong>Date:</strong> {when.strftime("%A, %d %B %Y")}</li>
  <li><strong>Time:</strong> {when.strftime("%I:%M %p")} UTC</li>
</ul>
<p>Good luck with your interview!</p>
<p><a href="{html_escape(settings.FRONTEND_BASE_URL)}/interviews">View your interviews</a></p>
<p>Best regards,<br>Interview Tracker Team</p>
""".strip()
    return subject, html


def _dispatch_one(
    db: Session,
    due: _DueInterview,
    reminder_type: ReminderType,
    *,
    now: datetime,
    sender: EmailSender,
) -> DispatchOutcome:
    if already_notified(db, due.id, reminder_type):
        logger.debug("Reminder %s already sent for interview %s", reminder_type.value, due.id)
        return DispatchOutcome.SKIPPED

    recipient: Recipient | None = get_user_email(db, due.user_id)
    if recipient is None:
        logger.warning("No email for user_id=%s; reminder for interview %s not sent", due.user_id, due.id)
        return DispatchOutcome.FAILED

    subject, html = render_reminder_email(
        company_name=due.company_name,
        role=due.role,
        scheduled_at=due.scheduled_at,
        recipient_name=recipient.display_name,
        reminder_type=reminder_type,
    )

    # Claim the (interview, type) slot before sending. The unique constraint turns a concurrent
    # dispatcher's claim into an IntegrityError, so only one of them ever sends.
    db.add(
        InterviewNotification(
            interview_id=due.id,
            notification_type=reminder_type.value,
            sent_at=now,
        )
    )
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("Reminder %s for interview %s claimed elsewhere", reminder_type.value, due.id)
        return DispatchOutcome.SKIPPED

    try:
        sender(to_email=recipient.email, subject=subject, html=html)
    except Exception:  # noqa: BLE001
        # No record, so the next run retries.
        db.rollback()
        logger.exception("Reminder %s for interview %s failed to send", reminder_type.value, due.id)
        return DispatchOutcome.FAILED

    db.commit()
    logger.info("Sent %s reminder for interview %s", reminder_type.value, due.id)
    return DispatchOutcome.SENT


def dispatch_reminders(
    db: Session,
    *,
    now: datetime | None = None,
    send: EmailSender | None = None,
) -> DispatchReport:
    """
    Send each due reminder at most once per (interview, reminder type).

    Failures are isolated per interview; anything not recorded as sent is picked up again by
    the next invocation while the interview is still inside the window.
    """
    current = now or utcnow()
    report = DispatchReport()

    if send is None and not settings.EMAIL_ENABLED:
        logger.info("Email disabled; skipping reminder dispatch")
        return report
    sender = send or send_email

    for reminder_type in ReminderType:
        counts = report.counts[reminder_type]
        due = [_DueInterview.from_interview(iv) for iv in find_due_interviews(db, reminder_type, current)]
        for item in due:
            counts.add(_dispatch_one(db, item, reminder_type, now=current, sender=sender))
        logger.info(
            "Reminder %s: due=%d sent=%d skipped=%d failed=%d",
            reminder_type.value,
            len(due),
            counts.sent,
            counts.skipped,
            counts.failed,
        )

    return report
