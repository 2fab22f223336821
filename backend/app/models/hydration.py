from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base

class HydrationSettings(Base):
    __tablename__ = "hydration_settings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    daily_goal_ml = Column(Integer, default=2500, nullable=False)
    workout_intensity = Column(String(20), default="moderate", nullable=False)  # light | moderate | intense
    notification_interval = Column(Integer, default=45, nullable=False)       # minutes, set by the model
    reminder_enabled = Column(Boolean, default=False, nullable=False)
    last_drink_at = Column(DateTime, nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="hydration")
