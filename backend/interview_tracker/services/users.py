from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from interview_tracker.models.user import User


@dataclass(frozen=True)
class Recipient:
    email: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_email(db: Session, user_id: int) -> Recipient | None:
    """
    Privileged lookup used by background jobs that act on behalf of any user.
    Returns None for unknown or inactive users.
    """
    user = db.get(User, user_id)
    if not user or not user.email or not user.is_active:
        return None
    return Recipient(email=user.email, name=user.name)
