from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from interview_tracker.core.base import Base


class InterviewQuestion(Base):
    """Generated preparation question, cached per (user, company, role)."""

    __tablename__ = "interview_questions"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company = Column(String(255), nullable=False, index=True)
    role = Column(String(255), nullable=False, index=True)

    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    example = Column(Text, nullable=True)
    type = Column(String(50), nullable=False, server_default="general")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
