from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import func
from sqlalchemy.orm import Session

from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.interview_rating import InterviewRating
from interview_tracker.services.expiry import sweep_expired_for_user
from interview_tracker.services.ratings import list_ratings_for_user, summarize_ratings

UPCOMING_PREVIEW_LIMIT = 5


@dataclass
class Dashboard:
    counts: dict[str, int]
    upcoming: list[Interview] = field(default_factory=list)
    rejected: list[Interview] = field(default_factory=list)
    awaiting_rating: list[Interview] = field(default_factory=list)
    has_ratings: bool = False
    overall_average: float = 0.0


def status_counts(db: Session, user_id: int) -> dict[str, int]:
    rows = (
        db.query(Interview.status, func.count(Interview.id))
        .filter(Interview.user_id == user_id)
        .group_by(Interview.status)
        .all()
    )
    counts = {s.value: 0 for s in InterviewStatus}
    for status_value, n in rows:
        if status_value in counts:
            counts[status_value] = int(n)
    counts["total"] = sum(counts.values())
    return counts


def build_dashboard(db: Session, user_id: int) -> Dashboard:
    sweep_expired_for_user(db, user_id)

    base = db.query(Interview).filter(Interview.user_id == user_id)

    upcoming = (
        base.filter(Interview.status == InterviewStatus.UPCOMING.value)
        .order_by(Interview.scheduled_at.asc(), Interview.id.asc())
        .limit(UPCOMING_PREVIEW_LIMIT)
        .all()
    )
    rejected = (
        base.filter(Interview.status == InterviewStatus.REJECTED.value)
        .order_by(Interview.scheduled_at.desc(), Interview.id.desc())
        .all()
    )
    awaiting_rating = (
        base.outerjoin(InterviewRating, InterviewRating.interview_id == Interview.id)
        .filter(
            Interview.status == InterviewStatus.COMPLETED.value,
            InterviewRating.id.is_(None),
        )
        .order_by(Interview.scheduled_at.desc(), Interview.id.desc())
        .all()
    )

    summary = summarize_ratings(list_ratings_for_user(db, user_id))

    return Dashboard(
        counts=status_counts(db, user_id),
        upcoming=upcoming,
        rejected=rejected,
        awaiting_rating=awaiting_rating,
        has_ratings=summary.count > 0,
        overall_average=summary.overall_average,
    )
