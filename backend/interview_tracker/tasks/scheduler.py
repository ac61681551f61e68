from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from interview_tracker.celery_app import celery_app
from interview_tracker.core.database import SessionLocal
from interview_tracker.services.expiry import complete_expired_interviews
from interview_tracker.services.scheduler import run_scheduler


logger = logging.getLogger(__name__)


def _with_db_session() -> Session:
    return SessionLocal()


@celery_app.task(name="scheduler.run")
def run_interview_scheduler() -> dict:
    db = _with_db_session()
    try:
        report = run_scheduler(db)
        return report.as_dict()
    except Exception:  # pylint: disable=broad-except
        # The next beat tick retries; records are only written for delivered reminders.
        logger.exception("Interview scheduler run failed")
        db.rollback()
        return {}
    finally:
        db.close()


@celery_app.task(name="scheduler.complete_expired_interviews")
def complete_expired() -> int:
    db = _with_db_session()
    try:
        return complete_expired_interviews(db)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Expired interview sweep failed")
        db.rollback()
        return 0
    finally:
        db.close()
