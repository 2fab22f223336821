from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship, backref
from datetime import datetime
from app.database import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    message = Column(String(255), nullable=False)
    is_read = Column(Boolean, default=False)
    type = Column(String(50), default="info") # e.g., 'hydration_reminder', 'plan_ready'
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationship
    user = relationship("User", backref=backref("notifications", passive_deletes=True))
