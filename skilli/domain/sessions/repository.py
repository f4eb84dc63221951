"""Session repository - Database operations for sessions"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Booking, SkillSession, User
from ...shared.filters import json_list_contains


class SessionRepository:
    """Repository for session database operations"""

    @staticmethod
    def get_by_id(db: Session, session_id: str) -> Optional[SkillSession]:
        return (
            db.query(SkillSession)
            .options(
                joinedload(SkillSession.provider).joinedload(User.profile),
                selectinload(SkillSession.bookings).joinedload(Booking.client),
            )
            .filter(SkillSession.id == session_id)
            .first()
        )

    @staticmethod
    def get_for_update(db: Session, session_id: str) -> Optional[SkillSession]:
        """Row-locking read that serialises bookings of one session"""
        return (
            db.query(SkillSession)
            .filter(SkillSession.id == session_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def create(db: Session, provider_id: str, **data) -> SkillSession:
        session = SkillSession(provider_id=provider_id, **data)
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def update(db: Session, session: SkillSession, **updates) -> SkillSession:
        for key, value in updates.items():
            if hasattr(session, key):
                setattr(session, key, value)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def delete(db: Session, session: SkillSession) -> None:
        db.delete(session)
        db.commit()

    @staticmethod
    def search(
        db: Session,
        skills: Optional[list[str]] = None,
        city: Optional[str] = None,
        is_online: Optional[bool] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        status: Optional[str] = None,
        provider_id: Optional[str] = None,
    ) -> list[SkillSession]:
        query = db.query(SkillSession)

        if skills:
            query = query.filter(
                or_(*[json_list_contains(SkillSession.skills, skill) for skill in skills])
            )
        if city:
            query = query.filter(SkillSession.location.ilike(f"%{city}%"))
        if is_online is not None:
            query = query.filter(SkillSession.is_online.is_(is_online))
        if min_price is not None:
            query = query.filter(SkillSession.price >= min_price)
        if max_price is not None:
            query = query.filter(SkillSession.price <= max_price)
        if status:
            query = query.filter(SkillSession.status == status)
        if provider_id:
            query = query.filter(SkillSession.provider_id == provider_id)

        return (
            query.options(
                joinedload(SkillSession.provider).joinedload(User.profile),
                selectinload(SkillSession.bookings),
            )
            .order_by(SkillSession.date.asc())
            .all()
        )

    @staticmethod
    def list_for_provider(db: Session, provider_id: str) -> list[SkillSession]:
        return (
            db.query(SkillSession)
            .options(
                joinedload(SkillSession.provider).joinedload(User.profile),
                selectinload(SkillSession.bookings),
            )
            .filter(SkillSession.provider_id == provider_id)
            .order_by(SkillSession.date.desc())
            .all()
        )
