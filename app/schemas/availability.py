# app/schemas/availability.py
from pydantic import BaseModel, Field, conint
from typing import Optional
from datetime import time, date


class AvailabilityCreate(BaseModel):
    day_of_week: Optional[conint(ge=1, le=7)] = Field(default=None, description="1=Mon, 2=Tue, …, 7=Sun (weekly)")
    specific_date: Optional[date] = Field(default=None, description="One-off date")
    start_time: time
    end_time: time
    is_available: bool = True


class AvailabilityResponse(AvailabilityCreate):
    id: int
    provider_id: int

    class Config:
        from_attributes = True


class AvailabilityCheckResponse(BaseModel):
    provider_id: int
    available: bool
