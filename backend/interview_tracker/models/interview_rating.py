from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, SmallInteger, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from interview_tracker.core.base import Base

RATING_CATEGORIES: tuple[str, ...] = (
    "technical",
    "managerial",
    "projects",
    "self_introduction",
    "hr_round",
    "dressup",
    "communication",
    "body_language",
    "punctuality",
)


class InterviewRating(Base):
    __tablename__ = "interview_ratings"
    __table_args__ = tuple(
        CheckConstraint(f"{name} BETWEEN 1 AND 5", name=f"ck_interview_ratings_{name}_range")
        for name in RATING_CATEGORIES
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # One rating per interview.
    interview_id = Column(
        Integer,
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    technical = Column(SmallInteger, nullable=False)
    managerial = Column(SmallInteger, nullable=False)
    projects = Column(SmallInteger, nullable=False)
    self_introduction = Column(SmallInteger, nullable=False)
    hr_round = Column(SmallInteger, nullable=False)
    dressup = Column(SmallInteger, nullable=False)
    communication = Column(SmallInteger, nullable=False)
    body_language = Column(SmallInteger, nullable=False)
    punctuality = Column(SmallInteger, nullable=False)

    overall_rating = Column(Float, nullable=False)
    feedback = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    interview = relationship("Interview", back_populates="rating")
