# app/db/models/notification.py
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from app.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    receiver_user_id = Column(Integer, nullable=False, index=True)
    channel = Column(String, nullable=False, default="in_app")
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    is_sent = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
