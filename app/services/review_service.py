# app/services/review_service.py
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core import config
from app.core.booking_workflow import BookingStatus
from app.core.errors import (
    AlreadyExistsError,
    BookingNotCompletedError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.core.pagination import Page, clamp_paging, offset_for
from app.core.security import Caller
from app.db.models.booking import Booking
from app.db.models.review import Review
from app.services.unit_of_work import commit

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW = "Review already submitted."


class ReviewService:

    def __init__(self, db: Session):
        self.db = db

    def create_review(self, caller: Caller, booking_id: int, rating: int, comment: Optional[str] = None) -> Review:
        if rating < 1 or rating > 5:
            raise ValidationFailedError("Rating must be between 1 and 5.")

        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)

        if booking.parent_id != caller.user_id:
            raise UnauthorizedError("Not your booking.")

        if booking.status != BookingStatus.COMPLETED.value:
            raise BookingNotCompletedError(BookingStatus(booking.status))

        exists = self.db.query(Review.id).filter(Review.booking_id == booking_id).first()
        if exists:
            raise AlreadyExistsError(DUPLICATE_REVIEW)

        # new reviews wait for moderation before they count in ratings
        review = Review(
            booking_id=booking.id,
            parent_id=caller.user_id,
            provider_id=booking.provider_id,
            rating=rating,
            comment=(comment or "").strip(),
            is_approved=False,
            is_hidden=False,
            created_at=datetime.utcnow(),
        )
        self.db.add(review)
        commit(self.db, duplicate_message=DUPLICATE_REVIEW)
        self.db.refresh(review)
        logger.info(f"Review {review.id} submitted for booking {booking_id}", extra={"booking_id": booking_id})
        return review

    def can_review(self, caller: Caller, booking_id: int) -> Tuple[bool, Optional[str]]:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            return False, "Booking not found"
        if booking.parent_id != caller.user_id:
            return False, "Not your booking"
        if booking.status != BookingStatus.COMPLETED.value:
            return False, "Booking not completed yet"
        if self.db.query(Review.id).filter(Review.booking_id == booking_id).first():
            return False, "Review already submitted"
        return True, None

    def list_mine(self, caller: Caller) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.parent_id == caller.user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    # --------------------------
    # moderation
    # --------------------------

    def admin_list(
        self,
        approved: Optional[bool] = None,
        hidden: Optional[bool] = None,
        query: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Page:
        page, page_size = clamp_paging(page, page_size, config.SEARCH_MAX_PAGE_SIZE)

        q = self.db.query(Review)
        if approved is not None:
            q = q.filter(Review.is_approved == approved)
        if hidden is not None:
            q = q.filter(Review.is_hidden == hidden)
        if query and query.strip():
            q = q.filter(Review.comment.ilike(f"%{query.strip()}%"))

        total = q.count()
        items = (
            q.order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset_for(page, page_size))
            .limit(page_size)
            .all()
        )
        return Page(items, total, page, page_size)

    def admin_decide(self, review_id: int, approve: bool, hide: bool = False) -> Review:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("Review", review_id)

        review.is_approved = bool(approve)
        review.is_hidden = bool(hide)
        commit(self.db)
        self.db.refresh(review)
        logger.info(f"Review {review_id} moderated: approved={review.is_approved} hidden={review.is_hidden}")
        return review
