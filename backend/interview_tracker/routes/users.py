from __future__ import annotations

from fastapi import APIRouter, Depends

from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.schemas.user import UserMeOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserMeOut)
def get_me(user: User = Depends(get_current_user)) -> User:
    return user
