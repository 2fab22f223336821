from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime
)
from sqlalchemy.orm import relationship, backref
from app.database import Base, JSONType

class WorkoutPlanHistory(Base):
    __tablename__ = "workout_plan_history"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    plan_name = Column(String(255), nullable=True)

    # Full snapshot of a replaced plan (schedule, rest days, tips, raw text)
    snapshot = Column(
        JSONType,
        nullable=False,
        comment="Snapshot of a previous workout plan"
    )

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship(
        "User",
        backref=backref("workout_history", passive_deletes=True)
    )
