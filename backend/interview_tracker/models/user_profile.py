from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from interview_tracker.core.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    # Shares the user's primary key: one profile per user.
    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    phone = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")
