from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.core.timeutils import utcnow
from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.services.periodic import PeriodicJob

logger = logging.getLogger(__name__)


def complete_expired_interviews(
    db: Session,
    *,
    user_id: int | None = None,
    now: datetime | None = None,
) -> int:
    """
    Flip every upcoming interview whose time has passed to completed.

    Single conditional UPDATE scoped by status + time, so concurrent sweeps converge on the
    same end state. Returns the number of rows changed (0 on a repeat run).
    """
    cutoff = now or utcnow()
    qry = db.query(Interview).filter(
        Interview.status == InterviewStatus.UPCOMING.value,
        Interview.scheduled_at < cutoff,
    )
    if user_id is not None:
        qry = qry.filter(Interview.user_id == user_id)

    changed = qry.update(
        {Interview.status: InterviewStatus.COMPLETED.value},
        synchronize_session="fetch",
    )
    db.commit()

    if changed:
        logger.info("Marked %d expired interviews as completed (user_id=%s)", changed, user_id)
    return int(changed or 0)


def sweep_expired_for_user(db: Session, user_id: int) -> int:
    """Best-effort sweep before serving fresh data; never fails the request."""
    try:
        return complete_expired_interviews(db, user_id=user_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Expired interview sweep failed for user_id=%s", user_id)
        return 0


def build_expiry_job(session_factory: Callable[[], Session] | None = None) -> PeriodicJob:
    if session_factory is None:
        from interview_tracker.core.database import SessionLocal

        session_factory = SessionLocal

    def _sweep() -> None:
        db = session_factory()
        try:
            complete_expired_interviews(db)
        finally:
            db.close()

    return PeriodicJob(
        "expiry-sweeper",
        _sweep,
        interval_seconds=settings.EXPIRY_SWEEP_INTERVAL_MINUTES * 60,
    )
