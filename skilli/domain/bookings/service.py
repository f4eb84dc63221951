"""Booking service - reserving, cancelling, completing and rating sessions"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    BOOKING_ACTIVE_STATUSES,
    BOOKING_CANCELLED,
    BOOKING_COMPLETED,
    BOOKING_CONFIRMED,
    Booking,
    User,
)
from ...shared.dates import utcnow
from ...shared.ratings import incremental_mean
from ..notifications.service import NotificationService
from ..sessions.repository import SessionRepository
from .repository import BookingRepository
from .schemas import BookingCreate, RateSessionRequest

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.sessions = SessionRepository()
        self.notifications = NotificationService(db)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def create_booking(self, data: BookingCreate, user: User) -> Booking:
        session = self.sessions.get_by_id(self.db, data.sessionId)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")

        if session.provider_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot book your own session")

        session_id, provider_id, title = session.id, session.provider_id, session.title
        try:
            # Held until the booking is committed, so seats are counted one booker at a time
            locked = self.sessions.get_for_update(self.db, session_id)
            if locked is None:
                raise HTTPException(status_code=404, detail="Session not found")

            if self.repo.count_active(self.db, session_id) >= locked.max_participants:
                raise HTTPException(status_code=400, detail="Session is fully booked")

            if locked.date < utcnow():
                raise HTTPException(status_code=400, detail="Cannot book a session that has already passed")

            if self.repo.get_for_session_and_client(self.db, session_id, user.id):
                raise HTTPException(status_code=409, detail="You have already booked this session")

            # No payment provider: bookings are confirmed and marked paid immediately
            booking = self.repo.create(
                self.db,
                session_id=session_id,
                client_id=user.id,
                amount=locked.price,
                status=BOOKING_CONFIRMED,
                payment_status="paid",
            )
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"✅ Booking {booking.id} created for session {session_id} by {user.id}")

        self.notifications.notify_provider_of_booking(provider_id, title, session_id, booking.id)
        return self.get_booking(booking.id)

    def get_my_bookings(self, user: User) -> list[Booking]:
        return self.repo.list_for_client(self.db, user.id)

    def get_provider_bookings(self, user: User) -> list[Booking]:
        return self.repo.list_for_provider(self.db, user.id)

    def cancel(self, booking_id: str, user: User) -> Booking:
        booking = self.get_booking(booking_id)

        if booking.client_id != user.id:
            raise HTTPException(status_code=403, detail="You can only cancel your own bookings")
        if booking.status not in BOOKING_ACTIVE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot cancel a {booking.status} booking")
        if booking.session.date < utcnow():
            raise HTTPException(
                status_code=400, detail="Cannot cancel a session that has already started"
            )

        booking.status = BOOKING_CANCELLED
        self.db.commit()
        logger.info(f"📥 Booking {booking_id} cancelled by client")
        return self.get_booking(booking_id)

    def complete(self, booking_id: str, user: User) -> Booking:
        """The session's provider marks an attended booking as completed"""
        booking = self.get_booking(booking_id)

        if booking.session.provider_id != user.id:
            raise HTTPException(
                status_code=403, detail="Only the session provider can complete bookings"
            )
        if booking.status not in BOOKING_ACTIVE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot complete a {booking.status} booking")

        booking.status = BOOKING_COMPLETED
        self.db.commit()
        logger.info(f"✅ Booking {booking_id} completed")
        return self.get_booking(booking_id)

    def rate_session(self, booking_id: str, data: RateSessionRequest, user: User) -> Booking:
        booking = self.get_booking(booking_id)

        if booking.client_id != user.id:
            raise HTTPException(status_code=403, detail="You can only rate sessions you attended")
        if booking.status != BOOKING_COMPLETED:
            raise HTTPException(status_code=400, detail="You can only rate completed sessions")
        if booking.rating is not None:
            raise HTTPException(status_code=409, detail="You have already rated this session")

        booking.rating = data.rating
        booking.review = data.review

        provider_profile = booking.session.provider.profile
        if provider_profile:
            provider_profile.rating, provider_profile.total_ratings = incremental_mean(
                provider_profile.rating, provider_profile.total_ratings, data.rating
            )
        self.db.commit()
        logger.info(f"⭐ Booking {booking_id} rated {data.rating}")

        self.notifications.notify_provider_of_rating(
            booking.session.provider_id, data.rating, booking.session_id, booking.id
        )
        return self.get_booking(booking_id)
