from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.core.timeutils import utcnow
from interview_tracker.models.interview import Interview
from interview_tracker.services.realtime import interview_events

logger = logging.getLogger(__name__)


def stale_cutoff(now: datetime | None = None) -> datetime:
    return (now or utcnow()) - timedelta(hours=settings.STALE_INTERVIEW_RETENTION_HOURS)


def purge_stale_interviews(db: Session, *, now: datetime | None = None) -> int:
    """
    Permanently delete interviews scheduled more than the retention window ago.
    Irreversible: ratings and reminder records go with them.
    """
    cutoff = stale_cutoff(now)
    stale = db.query(Interview).filter(Interview.scheduled_at < cutoff).all()
    removed = [(iv.id, iv.user_id) for iv in stale]

    for iv in stale:
        db.delete(iv)
    db.commit()

    for interview_id, user_id in removed:
        interview_events.publish_deleted(interview_id, user_id)

    logger.info("Removed %d past interviews (cutoff=%s)", len(removed), cutoff.isoformat())
    return len(removed)
