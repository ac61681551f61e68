from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interview_tracker.core.timeutils import utcnow
from interview_tracker.models.interview_notification import ReminderType
from interview_tracker.services.reminders import DispatchReport, EmailSender, dispatch_reminders
from interview_tracker.services.retention import purge_stale_interviews

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerReport:
    stale_interviews_removed: int
    reminders: DispatchReport

    def as_dict(self) -> dict:
        out: dict = {"stale_interviews_removed": self.stale_interviews_removed}
        for reminder_type in ReminderType:
            c = self.reminders.counts[reminder_type]
            out[reminder_type.value] = {"sent": c.sent, "skipped": c.skipped, "failed": c.failed}
        return out


def run_scheduler(
    db: Session,
    *,
    now: datetime | None = None,
    send: EmailSender | None = None,
) -> SchedulerReport:
    """Purge stale interviews, then send due reminders, against the same clock reading."""
    current = now or utcnow()
    logger.info("Starting interview scheduler run at %s", current.isoformat())

    try:
        removed = purge_stale_interviews(db, now=current)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Removing past interviews failed; continuing with reminders")
        removed = 0

    reminders = dispatch_reminders(db, now=current, send=send)
    return SchedulerReport(stale_interviews_removed=removed, reminders=reminders)
