from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from sqlalchemy import desc
from sqlalchemy.orm import Session

from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.services.interview_status import OUTCOME_STATUSES, coerce_status, transition


def get_interview_for_user(db: Session, interview_id: int, user_id: int) -> Interview:
    iv = (
        db.query(Interview)
        .filter(Interview.id == interview_id, Interview.user_id == user_id)
        .first()
    )
    if not iv:
        raise HTTPException(status_code=404, detail="Interview not found")
    return iv


def list_interviews_for_user(
    db: Session,
    user_id: int,
    statuses: list[InterviewStatus] | None = None,
) -> list[Interview]:
    qry = db.query(Interview).filter(Interview.user_id == user_id)
    if statuses:
        qry = qry.filter(Interview.status.in_([s.value for s in statuses]))
    return qry.order_by(desc(Interview.scheduled_at), desc(Interview.id)).all()


def apply_interview_update(iv: Interview, data: dict[str, Any]) -> dict[str, Any]:
    """
    Apply a partial edit. Status changes go through the status machine and raise
    IllegalStatusTransition before any field is touched.
    """
    if "status" in data:
        if data["status"] is None:
            data.pop("status")
        else:
            data["status"] = transition(iv.status, data["status"]).value

    for key in ("company_name", "role", "salary", "scheduled_at"):
        # Required columns: an explicit null means "leave as is".
        if key in data and data[key] is None:
            data.pop(key)

    if "notes" in data and isinstance(data["notes"], str):
        data["notes"] = data["notes"].strip() or None

    for k, v in data.items():
        setattr(iv, k, v)
    return data


def record_outcome(iv: Interview, outcome: str | InterviewStatus) -> InterviewStatus:
    target = coerce_status(outcome)
    if target not in OUTCOME_STATUSES:
        raise ValueError("Outcome must be succeeded or rejected")
    iv.status = transition(iv.status, target).value
    return target
