from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.schemas.rating import RatingCreate, RatingOut, RatingSummaryOut
from interview_tracker.services.interviews import get_interview_for_user
from interview_tracker.services.ratings import (
    create_rating,
    list_ratings_for_user,
    suggestion_for,
    summarize_ratings,
)

router = APIRouter(tags=["ratings"], dependencies=[Depends(get_current_user)])


@router.post("/interviews/{interview_id}/rating", response_model=RatingOut)
def rate_interview(
    interview_id: int,
    payload: RatingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = get_interview_for_user(db, interview_id, user.id)
    return create_rating(
        db,
        interview=iv,
        user_id=user.id,
        scores=payload.model_dump(exclude={"feedback"}),
        feedback=payload.feedback,
    )


@router.get("/interviews/{interview_id}/rating", response_model=RatingOut)
def get_interview_rating(
    interview_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = get_interview_for_user(db, interview_id, user.id)
    if iv.rating is None:
        raise HTTPException(status_code=404, detail="Rating not found")
    return iv.rating


@router.get("/ratings", response_model=list[RatingOut])
def list_ratings(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_ratings_for_user(db, user.id)


@router.get("/ratings/summary", response_model=RatingSummaryOut)
def ratings_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    summary = summarize_ratings(list_ratings_for_user(db, user.id))
    return {
        "count": summary.count,
        "overall_average": summary.overall_average,
        "category_averages": summary.category_averages,
        "strengths": [
            {"category": c.category, "label": c.label, "score": c.score} for c in summary.strengths
        ],
        "improvements": [
            {"category": c.category, "label": c.label, "score": c.score, "suggestion": suggestion_for(c.category)}
            for c in summary.improvements
        ],
    }
