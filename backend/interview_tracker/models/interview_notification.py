from __future__ import annotations

from datetime import timedelta
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from interview_tracker.core.base import Base


class ReminderType(str, Enum):
    ONE_DAY_BEFORE = "one_day_before"
    ONE_HOUR_BEFORE = "one_hour_before"

    @property
    def lead_time(self) -> timedelta:
        if self is ReminderType.ONE_DAY_BEFORE:
            return timedelta(hours=24)
        return timedelta(hours=1)

    @property
    def label(self) -> str:
        if self is ReminderType.ONE_DAY_BEFORE:
            return "tomorrow"
        return "in 1 hour"


class InterviewNotification(Base):
    """Dedup record: at most one per (interview, reminder type)."""

    __tablename__ = "interview_notifications"
    __table_args__ = (
        UniqueConstraint("interview_id", "notification_type", name="uq_interview_notification_type"),
    )

    id = Column(Integer, primary_key=True, index=True)

    interview_id = Column(
        Integer,
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    notification_type = Column(String(32), nullable=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interview = relationship("Interview", back_populates="notifications")
