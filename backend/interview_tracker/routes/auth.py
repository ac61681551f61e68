# interview_tracker/routes/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.core.database import get_db
from interview_tracker.core.security import create_access_token, hash_password, verify_password
from interview_tracker.models.user import User
from interview_tracker.schemas.auth import LoginIn, MessageOut, RegisterIn, TokenOut
from interview_tracker.services.users import get_user_by_email, normalize_email

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


@router.post("/register", response_model=MessageOut)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    if len(payload.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
        )

    if get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        name=name,
        password_hash=hash_password(payload.password),
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")

    logger.info("Registered user_id=%s", user.id)
    return {"message": "Registration successful. You can now log in."}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)

    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return {"access_token": create_access_token(subject=email), "token_type": "bearer"}
