from sqlalchemy import Column, Integer, String, Float, Date, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime, date
from app.database import Base

class WorkoutCompletion(Base):
    __tablename__ = "workout_completions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    day_number = Column(Integer, nullable=False)   # Plan day ("Day N")
    notes = Column(String(255), nullable=True)
    calories_burned = Column(Float, default=0.0)

    completed_at = Column(DateTime, default=datetime.utcnow)

class HydrationLog(Base):
    """One row per user per day: water drunk vs the goal in force that day."""
    __tablename__ = "hydration_logs"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_hydration_log_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, default=date.today, nullable=False)

    total_ml = Column(Integer, default=0, nullable=False)
    goal_ml = Column(Integer, default=2500, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
