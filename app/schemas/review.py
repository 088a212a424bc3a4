# app/schemas/review.py
from pydantic import BaseModel, Field, conint
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    booking_id: int
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    parent_id: int
    provider_id: int
    rating: int
    comment: Optional[str]
    is_approved: bool
    is_hidden: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewDecision(BaseModel):
    approve: bool
    hide: bool = False


class CanReviewResponse(BaseModel):
    can: bool
    reason: Optional[str] = None


class ReviewListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[ReviewResponse]
