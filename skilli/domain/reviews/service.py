"""
Review service - session reviews and the rating aggregates they feed

A new review folds into the provider's and the session's running average
incrementally; editing a review's rating recomputes both averages from all
reviews.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import BOOKING_COMPLETED, BOOKING_CONFIRMED, Booking, ProviderProfile, Review, User
from ...shared.dates import utcnow
from ...shared.ratings import average, incremental_mean
from ..bookings.repository import BookingRepository
from ..sessions.repository import SessionRepository
from .repository import ReviewRepository
from .schemas import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


def booking_allows_review(booking: Booking) -> bool:
    """Completed, or confirmed and the session date has passed"""
    if booking.status == BOOKING_COMPLETED:
        return True
    return booking.status == BOOKING_CONFIRMED and booking.session.date < utcnow()


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()
        self.sessions = SessionRepository()
        self.bookings = BookingRepository()

    def _provider_profile(self, provider_id: str) -> Optional[ProviderProfile]:
        return self.db.query(ProviderProfile).filter(ProviderProfile.user_id == provider_id).first()

    def create_review(self, data: ReviewCreate, user: User) -> Review:
        session = self.sessions.get_by_id(self.db, data.sessionId)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")

        if session.provider_id != data.providerId:
            raise HTTPException(status_code=400, detail="Provider does not match session provider")

        booking = self.bookings.get_for_session_and_client(self.db, session.id, user.id)
        if not booking:
            raise HTTPException(
                status_code=403, detail="You must attend the session to leave a review"
            )
        if not booking_allows_review(booking):
            raise HTTPException(status_code=403, detail="You can only review completed sessions")

        if self.repo.get_for_reviewer_and_session(self.db, user.id, session.id):
            raise HTTPException(status_code=409, detail="You have already reviewed this session")

        review = self.repo.add(
            self.db,
            reviewer_id=user.id,
            provider_id=data.providerId,
            session_id=session.id,
            rating=data.rating,
            comment=data.comment,
        )

        profile = self._provider_profile(data.providerId)
        if profile:
            profile.rating, profile.total_ratings = incremental_mean(
                profile.rating, profile.total_ratings, data.rating
            )
        session.rating, session.total_ratings = incremental_mean(
            session.rating, session.total_ratings, data.rating
        )

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"⭐ Review {review.id} ({data.rating}) on session {session.id}")
        return self.get_review(review.id)

    def get_review(self, review_id: str) -> Review:
        review = self.repo.get_by_id(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        return review

    def _recalculate(self, provider_id: str, session_id: str):
        profile = self._provider_profile(provider_id)
        if profile:
            profile.rating, profile.total_ratings = average(
                self.repo.ratings_for_provider(self.db, provider_id)
            )
        session = self.sessions.get_by_id(self.db, session_id)
        if session:
            session.rating, session.total_ratings = average(
                self.repo.ratings_for_session(self.db, session_id)
            )

    def update_review(self, review_id: str, data: ReviewUpdate, user: User) -> Review:
        review = self.get_review(review_id)
        if review.reviewer_id != user.id:
            raise HTTPException(status_code=403, detail="You can only update your own reviews")

        rating_changed = data.rating is not None and data.rating != review.rating
        if data.rating is not None:
            review.rating = data.rating
        if data.comment is not None:
            review.comment = data.comment

        if rating_changed:
            self.db.flush()
            self._recalculate(review.provider_id, review.session_id)

        self.db.commit()
        return self.get_review(review_id)

    def get_provider_reviews(self, provider_id: str) -> list[Review]:
        return self.repo.list_by(self.db, provider_id=provider_id)

    def get_session_reviews(self, session_id: str) -> list[Review]:
        return self.repo.list_by(self.db, session_id=session_id)

    def get_my_reviews(self, user: User) -> list[Review]:
        return self.repo.list_by(self.db, reviewer_id=user.id)

    def can_review_session(self, session_id: str, user: User) -> dict:
        booking = self.bookings.get_for_session_and_client(self.db, session_id, user.id)
        if not booking:
            return {"canReview": False, "reason": "Session not booked"}
        if not booking_allows_review(booking):
            return {"canReview": False, "reason": "Session not completed yet"}

        existing = self.repo.get_for_reviewer_and_session(self.db, user.id, session_id)
        if existing:
            return {"canReview": False, "reason": "Already reviewed", "review": existing}
        return {"canReview": True}
