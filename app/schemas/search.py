# app/schemas/search.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, time


class SitterSearchQuery(BaseModel):
    only_approved: bool = True
    location: Optional[str] = None
    min_rate: Optional[float] = Field(default=None, ge=0)
    max_rate: Optional[float] = Field(default=None, ge=0)
    min_experience_years: Optional[int] = Field(default=None, ge=0)
    skills: List[str] = Field(default_factory=list)

    # availability window, applied only when all three are given
    on_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    page: int = 1
    page_size: int = 20


class SitterCard(BaseModel):
    profile_id: int
    user_id: int
    full_name: str
    email: str
    phone: str
    hourly_rate: float
    experience_years: int
    location_text: str
    is_approved: bool
    avg_rating: float
    review_count: int


class SitterSearchResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[SitterCard]
