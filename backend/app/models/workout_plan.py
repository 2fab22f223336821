from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base, JSONType

class WorkoutPlan(Base):
    __tablename__ = "workout_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), unique=True, nullable=False, index=True)

    plan_name = Column(String(255), default="")
    summary = Column(String(500), default="")
    full_plan = Column(Text, default="")  # Raw LLM text, kept as-is
    structure = Column(String(255), default="")

    # JSON Fields for complex data
    weekly_schedule = Column(JSONType, nullable=False, default=list)
    rest_days = Column(JSONType, default=list)
    tips = Column(JSONType, default=list)

    generated_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    user = relationship("User", back_populates="workout_plan")
