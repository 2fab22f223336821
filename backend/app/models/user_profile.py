# app/models/user_profile.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base, JSONType

class UserProfile(Base):
    """Fitness goals and weekly schedule collected by the chat assistant."""
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), unique=True, nullable=False)

    # Fitness goals
    primary_goal = Column(String(100), default="")    # "Build muscle", "Lose weight", ...
    fitness_level = Column(String(50), default="")    # "Beginner", "Intermediate", "Advanced"
    available_equipment = Column(JSONType, default=list)
    injuries = Column(JSONType, default=list)

    # Schedule
    workout_days_per_week = Column(Integer, nullable=True)
    time_per_workout = Column(Integer, nullable=True)  # minutes

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")
