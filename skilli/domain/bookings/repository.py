"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import BOOKING_ACTIVE_STATUSES, Booking, SkillSession, User


def _with_relations(query):
    return query.options(
        joinedload(Booking.session).joinedload(SkillSession.provider).joinedload(User.profile),
        joinedload(Booking.client),
    )


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return _with_relations(db.query(Booking)).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_for_session_and_client(db: Session, session_id: str, client_id: str) -> Optional[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.session_id == session_id, Booking.client_id == client_id)
            .first()
        )

    @staticmethod
    def count_active(db: Session, session_id: str) -> int:
        return (
            db.query(Booking)
            .filter(Booking.session_id == session_id, Booking.status.in_(BOOKING_ACTIVE_STATUSES))
            .count()
        )

    @staticmethod
    def create(db: Session, **data) -> Booking:
        booking = Booking(**data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def list_for_client(db: Session, client_id: str) -> list[Booking]:
        return (
            _with_relations(db.query(Booking))
            .filter(Booking.client_id == client_id)
            .order_by(Booking.created_at.desc())
            .all()
        )

    @staticmethod
    def list_for_provider(db: Session, provider_id: str) -> list[Booking]:
        return (
            _with_relations(db.query(Booking))
            .join(SkillSession, Booking.session_id == SkillSession.id)
            .filter(SkillSession.provider_id == provider_id)
            .order_by(Booking.created_at.desc())
            .all()
        )
