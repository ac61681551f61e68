from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.schemas.dashboard import DashboardOut
from interview_tracker.services.dashboard import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=DashboardOut)
def get_dashboard(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    d = build_dashboard(db, user.id)
    return {
        "counts": d.counts,
        "upcoming": d.upcoming,
        "rejected": d.rejected,
        "awaiting_rating": d.awaiting_rating,
        "has_ratings": d.has_ratings,
        "overall_average": d.overall_average,
    }
