"""Provider profile repository - Database operations for provider profiles"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import ProviderProfile, User
from ...shared.filters import json_list_contains


class ProviderProfileRepository:
    """Repository for provider profile database operations"""

    @staticmethod
    def get_by_user_id(db: Session, user_id: str) -> Optional[ProviderProfile]:
        return (
            db.query(ProviderProfile)
            .options(joinedload(ProviderProfile.user))
            .filter(ProviderProfile.user_id == user_id)
            .first()
        )

    @staticmethod
    def create(db: Session, user_id: str, **data) -> ProviderProfile:
        profile = ProviderProfile(user_id=user_id, **data)
        db.add(profile)
        return profile

    @staticmethod
    def apply(profile: ProviderProfile, **updates) -> ProviderProfile:
        for key, value in updates.items():
            if hasattr(profile, key):
                setattr(profile, key, value)
        return profile

    @staticmethod
    def search(
        db: Session,
        city: Optional[str] = None,
        skills: Optional[list[str]] = None,
        level: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[ProviderProfile]:
        query = db.query(ProviderProfile).join(User, ProviderProfile.user_id == User.id)

        if city:
            query = query.filter(
                or_(ProviderProfile.city == city, json_list_contains(ProviderProfile.cities, city))
            )
        if skills:
            query = query.filter(
                or_(*[json_list_contains(ProviderProfile.skills, skill) for skill in skills])
            )
        if level:
            query = query.filter(ProviderProfile.level == level)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(ProviderProfile.bio.ilike(pattern), User.name.ilike(pattern)))
        if status:
            query = query.filter(ProviderProfile.profile_status == status)

        return (
            query.options(joinedload(ProviderProfile.user))
            .order_by(ProviderProfile.rating.desc(), ProviderProfile.created_at.desc())
            .all()
        )
