from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.user import User
from interview_tracker.schemas.auth import MessageOut
from interview_tracker.schemas.interview import InterviewCreate, InterviewOut, InterviewOutcomeIn, InterviewUpdate
from interview_tracker.services.expiry import sweep_expired_for_user
from interview_tracker.services.interview_status import IllegalStatusTransition
from interview_tracker.services.interviews import (
    apply_interview_update,
    get_interview_for_user,
    list_interviews_for_user,
    record_outcome,
)
from interview_tracker.services.realtime import InterviewDeleted, interview_events

router = APIRouter(prefix="/interviews", tags=["interviews"], dependencies=[Depends(get_current_user)])

logger = logging.getLogger(__name__)

SSE_KEEPALIVE_SECONDS = 15.0


def format_sse(event: InterviewDeleted) -> str:
    data = json.dumps({"interview_id": event.interview_id})
    return f"event: interview_deleted\ndata: {data}\n\n"


def _conflict(exc: IllegalStatusTransition) -> HTTPException:
    return HTTPException(status_code=409, detail=str(exc))


@router.get("", response_model=list[InterviewOut])
def list_interviews(
    status: list[InterviewStatus] | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    sweep_expired_for_user(db, user.id)
    return list_interviews_for_user(db, user.id, status)


@router.post("", response_model=InterviewOut)
def create_interview(
    payload: InterviewCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = Interview(
        user_id=user.id,
        company_name=payload.company_name,
        role=payload.role,
        salary=payload.salary,
        scheduled_at=payload.scheduled_at,
        status=payload.status.value,
        notes=(payload.notes or "").strip() or None,
    )
    db.add(iv)
    db.commit()
    db.refresh(iv)
    logger.info("Interview %s created for user_id=%s", iv.id, user.id)
    return iv


# Declared before /{interview_id} so "events" is not parsed as an id.
@router.get("/events")
async def stream_interview_events(request: Request, user: User = Depends(get_current_user)):
    """
    Server-Sent Events stream of the caller's interview deletions. Clients refetch their list on
    every `interview_deleted` event.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[InterviewDeleted] = asyncio.Queue()
    user_id = user.id

    def _on_event(event: InterviewDeleted) -> None:
        if event.user_id == user_id:
            loop.call_soon_threadsafe(queue.put_nowait, event)

    unsubscribe = interview_events.subscribe(_on_event)

    async def _stream():
        try:
            yield ": connected\n\n"
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=SSE_KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield format_sse(event)
        finally:
            unsubscribe()

    return StreamingResponse(
        _stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/{interview_id}", response_model=InterviewOut)
def get_interview(
    interview_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_interview_for_user(db, interview_id, user.id)


@router.patch("/{interview_id}", response_model=InterviewOut)
def update_interview(
    interview_id: int,
    payload: InterviewUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = get_interview_for_user(db, interview_id, user.id)

    data = payload.model_dump(exclude_unset=True)
    if not data:
        return iv

    try:
        apply_interview_update(iv, data)
    except IllegalStatusTransition as e:
        db.rollback()
        raise _conflict(e)

    db.commit()
    db.refresh(iv)
    return iv


@router.post("/{interview_id}/outcome", response_model=InterviewOut)
def set_interview_outcome(
    interview_id: int,
    payload: InterviewOutcomeIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = get_interview_for_user(db, interview_id, user.id)
    try:
        record_outcome(iv, payload.outcome)
    except IllegalStatusTransition as e:
        raise _conflict(e)

    db.commit()
    db.refresh(iv)
    logger.info("Interview %s marked %s", iv.id, iv.status)
    return iv


@router.delete("/{interview_id}", response_model=MessageOut)
def delete_interview(
    interview_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    iv = get_interview_for_user(db, interview_id, user.id)
    db.delete(iv)
    db.commit()

    interview_events.publish_deleted(interview_id, user.id)
    return {"message": "Interview deleted"}
