from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.core.database import get_db
from interview_tracker.schemas.scheduler import SchedulerRunOut
from interview_tracker.services.scheduler import run_scheduler

router = APIRouter(prefix="/internal/scheduler", tags=["internal"], include_in_schema=False)

logger = logging.getLogger(__name__)


def _require_internal_token(x_internal_token: str | None = Header(default=None)) -> None:
    """Shared-secret auth for the external cron that drives reminders."""
    if not settings.SCHEDULER_SHARED_SECRET:
        raise HTTPException(status_code=500, detail="Server missing SCHEDULER_SHARED_SECRET")

    if not x_internal_token or not hmac.compare_digest(x_internal_token, settings.SCHEDULER_SHARED_SECRET):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/run", response_model=SchedulerRunOut, dependencies=[Depends(_require_internal_token)])
def run_interview_scheduler(db: Session = Depends(get_db)):
    report = run_scheduler(db)
    logger.info(
        "Scheduler run: removed=%d reminders_sent=%d",
        report.stale_interviews_removed,
        report.reminders.total_sent,
    )
    return report.as_dict()
