# app/schemas/attendance.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CheckIn(BaseModel):
    location: Optional[str] = None


class CheckInResponse(BaseModel):
    already_checked_in: bool
    attendance_id: int
    check_in_time: datetime


class AttendanceResponse(BaseModel):
    id: int
    booking_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    location: Optional[str] = None

    class Config:
        from_attributes = True
