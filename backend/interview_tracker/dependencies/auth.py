# interview_tracker/dependencies/auth.py
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.core.security import verify_token_purpose
from interview_tracker.models.user import User
from interview_tracker.services.users import get_user_by_email

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validates:
      - Authorization: Bearer <token>
      - token signature + exp + purpose
      - user exists + is_active
    Returns:
      - User SQLAlchemy model
    """
    if not creds or creds.scheme.lower() != "bearer":
        raise _unauthorized("Missing Authorization header")

    try:
        payload = verify_token_purpose(creds.credentials, expected_purpose="access")
    except (ValueError, JWTError):
        raise _unauthorized("Invalid or expired token")

    email = str(payload.get("sub") or "").strip().lower()
    if not email:
        raise _unauthorized("Invalid or expired token")

    user = get_user_by_email(db, email)
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("User is inactive")

    return user
