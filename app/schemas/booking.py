# app/schemas/booking.py
from pydantic import BaseModel, Field
from datetime import date, time, datetime
from typing import Optional


# --- CREATE ---
class BookingCreate(BaseModel):
    provider_id: int
    booking_date: date
    start_time: time
    end_time: time
    service_address: str = ""
    notes: Optional[str] = None


# --- ACTIONS (provider / parent) ---
class BookingAction(BaseModel):
    note: Optional[str] = None


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class BookingReschedule(BaseModel):
    booking_date: date
    start_time: time
    end_time: time
    note: Optional[str] = None


# --- ADMIN ---
class BookingStatusChange(BaseModel):
    to_status: str = Field(..., description="pending, accepted, rejected, confirmed, completed, cancelled")
    note: Optional[str] = None


# --- RESPONSE ---
class BookingResponse(BaseModel):
    id: int
    parent_id: int
    provider_id: int
    booking_date: date
    start_time: time
    end_time: time
    service_address: str
    notes: Optional[str] = None
    status: str
    total_amount: Optional[float] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingHistoryItem(BaseModel):
    id: int
    booking_id: int
    from_status: str
    to_status: str
    changed_by_user_id: int
    changed_at: datetime
    note: Optional[str] = None

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[BookingResponse]


class ConflictCheckResponse(BaseModel):
    conflict: bool
