from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.schemas.profile import SmsNotificationIn, SmsNotificationOut
from interview_tracker.services.interviews import get_interview_for_user
from interview_tracker.services.sms import MissingPhoneNumber, send_sms_notification

router = APIRouter(prefix="/notifications", tags=["notifications"], dependencies=[Depends(get_current_user)])


@router.post("/sms", response_model=SmsNotificationOut)
def send_sms(
    payload: SmsNotificationIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if payload.interview_id is not None:
        get_interview_for_user(db, payload.interview_id, user.id)

    try:
        result = send_sms_notification(
            db,
            user_id=user.id,
            message=payload.message,
            phone=payload.phone,
            interview_id=payload.interview_id,
        )
    except MissingPhoneNumber as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": result.success, "message": result.message}
