from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from fastapi import HTTPException
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.interview_rating import RATING_CATEGORIES, InterviewRating

logger = logging.getLogger(__name__)

CATEGORY_LABELS: dict[str, str] = {
    "technical": "Technical",
    "managerial": "Managerial",
    "projects": "Projects",
    "self_introduction": "Self-Intro",
    "hr_round": "HR Round",
    "dressup": "Dress-up",
    "communication": "Communication",
    "body_language": "Body Language",
    "punctuality": "Punctuality",
}

_SUGGESTIONS: dict[str, str] = {
    "body_language": "Practice maintaining good posture, make appropriate eye contact, and avoid nervous habits.",
    "communication": "Work on speaking clearly, using concrete examples, and listening actively during conversations.",
    "managerial": "Prepare more STAR method examples about your leadership and conflict resolution experiences.",
    "self_introduction": "Structure your introduction to highlight your relevant skills and accomplishments in under 2 minutes.",
    "technical": "Practice solving coding problems on platforms like LeetCode and review fundamental concepts.",
}

_SKIPPED_KEYS = frozenset({"feedback", "overall_rating"})


def compute_overall_rating(scores: Mapping[str, int]) -> float:
    values = [scores[name] for name in RATING_CATEGORIES]
    return round(sum(values) / len(values), 2)


def suggestion_for(category: str) -> str:
    label = CATEGORY_LABELS.get(category, category)
    return _SUGGESTIONS.get(category, f"Focus on improving your {label.lower()} skills through targeted practice.")


def create_rating(
    db: Session,
    *,
    interview: Interview,
    user_id: int,
    scores: Mapping[str, int],
    feedback: str | None = None,
) -> InterviewRating:
    """
    Record the rating and move an upcoming interview to completed in one commit.
    Interviews that are already completed/succeeded/rejected keep their status.
    """
    if interview.rating is not None:
        raise HTTPException(status_code=409, detail="Interview already rated")

    rating = InterviewRating(
        user_id=user_id,
        interview_id=interview.id,
        overall_rating=compute_overall_rating(scores),
        feedback=(feedback or "").strip() or None,
        **{name: int(scores[name]) for name in RATING_CATEGORIES},
    )
    db.add(rating)

    if interview.status == InterviewStatus.UPCOMING.value:
        interview.status = InterviewStatus.COMPLETED.value

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Interview already rated") from None

    db.refresh(rating)
    logger.info("Rating %s recorded for interview %s (overall=%.2f)", rating.id, interview.id, rating.overall_rating)
    return rating


def list_ratings_for_user(db: Session, user_id: int) -> list[InterviewRating]:
    return (
        db.query(InterviewRating)
        .filter(InterviewRating.user_id == user_id)
        .order_by(desc(InterviewRating.created_at), desc(InterviewRating.id))
        .all()
    )


@dataclass(frozen=True)
class CategoryScore:
    category: str
    label: str
    score: float


@dataclass
class RatingSummary:
    count: int = 0
    overall_average: float = 0.0
    category_averages: dict[str, float] = field(default_factory=dict)
    strengths: list[CategoryScore] = field(default_factory=list)
    improvements: list[CategoryScore] = field(default_factory=list)


def _as_mapping(rating: Any) -> Mapping[str, Any]:
    if isinstance(rating, Mapping):
        return rating
    return {name: getattr(rating, name, None) for name in (*RATING_CATEGORIES, "overall_rating")}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def summarize_ratings(ratings: Iterable[Any], *, top_n: int = 3) -> RatingSummary:
    """
    Averages over a user's ratings (ORM rows or plain dicts).

    Category sums only include numeric values that are present; the overall average is the
    mean of each rating's `overall_rating`. Empty input yields zeros.
    """
    rows = [_as_mapping(r) for r in ratings]
    if not rows:
        return RatingSummary(category_averages={name: 0.0 for name in RATING_CATEGORIES})

    sums: dict[str, float] = {}
    for row in rows:
        for key, value in row.items():
            if key in _SKIPPED_KEYS or key not in CATEGORY_LABELS or not _is_number(value):
                continue
            sums[key] = sums.get(key, 0.0) + float(value)

    count = len(rows)
    category_averages = {name: round(sums.get(name, 0.0) / count, 2) for name in RATING_CATEGORIES}

    overall_values = [float(row["overall_rating"]) for row in rows if _is_number(row.get("overall_rating"))]
    overall_average = round(sum(overall_values) / count, 2) if overall_values else 0.0

    ranked = [CategoryScore(name, CATEGORY_LABELS[name], score) for name, score in category_averages.items()]
    strengths = sorted(ranked, key=lambda c: c.score, reverse=True)[:top_n]
    improvements = sorted(ranked, key=lambda c: c.score)[:top_n]

    return RatingSummary(
        count=count,
        overall_average=overall_average,
        category_averages=category_averages,
        strengths=strengths,
        improvements=improvements,
    )
