# app/api/routes/review.py
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import get_review_service
from app.core.security import Caller, ROLE_PARENT, require_role
from app.schemas.review import CanReviewResponse, ReviewCreate, ReviewResponse
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


# Parent reviews a completed booking
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review_in: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    return service.create_review(current_user, review_in.booking_id, review_in.rating, review_in.comment)


@router.get("/can-review/{booking_id}", response_model=CanReviewResponse)
def can_review(
    booking_id: int,
    service: ReviewService = Depends(get_review_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    can, reason = service.can_review(current_user, booking_id)
    return CanReviewResponse(can=can, reason=reason)


@router.get("/me", response_model=List[ReviewResponse])
def my_reviews(
    service: ReviewService = Depends(get_review_service),
    current_user: Caller = Depends(require_role(ROLE_PARENT)),
):
    return service.list_mine(current_user)
