from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from interview_tracker.core.base import Base


class InterviewStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    SUCCEEDED = "succeeded"
    REJECTED = "rejected"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company_name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    # Free-text numeric figure (e.g. "18" or "18.5"); the unit is up to the user.
    salary = Column(String(50), nullable=False)

    scheduled_at = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, server_default=InterviewStatus.UPCOMING.value, index=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="interviews")

    rating = relationship(
        "InterviewRating",
        back_populates="interview",
        cascade="all, delete-orphan",
        uselist=False,
    )

    notifications = relationship(
        "InterviewNotification",
        back_populates="interview",
        cascade="all, delete-orphan",
    )

    @property
    def has_rating(self) -> bool:
        return self.rating is not None
