# app/db/models/attendance.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from app.db.base import Base


class Attendance(Base):
    """Sitter arrival/departure for one booking."""
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)

    check_in_time = Column(DateTime, nullable=False)
    check_out_time = Column(DateTime, nullable=True)
    location = Column(String, nullable=True)
