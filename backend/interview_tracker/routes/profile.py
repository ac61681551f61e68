from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.models.user_profile import UserProfile
from interview_tracker.schemas.profile import ProfileOut, ProfileUpdateIn

router = APIRouter(prefix="/profile", tags=["profile"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = db.get(UserProfile, user.id)
    return {"phone": profile.phone if profile else None}


@router.put("", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = db.get(UserProfile, user.id)
    if profile is None:
        profile = UserProfile(id=user.id)
        db.add(profile)
    profile.phone = payload.phone
    db.commit()
    return {"phone": profile.phone}
