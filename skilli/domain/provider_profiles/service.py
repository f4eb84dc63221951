"""Provider profile service - onboarding, discovery and moderation status"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    PROFILE_APPROVED,
    PROFILE_DRAFT,
    PROFILE_PENDING_REVIEW,
    PROFILE_SUSPENDED,
    ProviderProfile,
    User,
)
from ...shared.schemas import to_columns
from .repository import ProviderProfileRepository
from .schemas import ProviderProfileUpsert

logger = logging.getLogger(__name__)

MIN_CATEGORIES = 1
MIN_SKILLS = 3
MIN_BIO_LENGTH = 50
FORMATS_REQUIRING_CITIES = ("IN_PERSON", "BOTH")

# Only an admin moves a profile into or out of these
ADMIN_STATUSES = (PROFILE_APPROVED, PROFILE_SUSPENDED)


def is_profile_complete(profile: ProviderProfile) -> bool:
    """Whether every onboarding step has been filled in"""
    if len(profile.categories or []) < MIN_CATEGORIES:
        return False
    if len(profile.skills or []) < MIN_SKILLS:
        return False
    if not profile.teaching_format:
        return False
    if profile.teaching_format in FORMATS_REQUIRING_CITIES and not profile.cities:
        return False
    if not profile.experience_level:
        return False
    if not profile.hourly_rate_type:
        return False
    if profile.hourly_rate_type == "CUSTOM" and not (profile.hourly_rate_min or 0) > 0:
        return False
    if len((profile.bio or "").strip()) < MIN_BIO_LENGTH:
        return False
    return True


def compute_profile_status(profile: ProviderProfile) -> str:
    """
    Status derived from completeness.

    APPROVED and SUSPENDED are decisions made by an admin and are kept as-is;
    otherwise a complete profile waits for review and an incomplete one stays
    a draft. No phone/email verification gate is applied.
    """
    if profile.profile_status in ADMIN_STATUSES:
        return profile.profile_status
    return PROFILE_PENDING_REVIEW if is_profile_complete(profile) else PROFILE_DRAFT


class ProviderProfileService:
    """Service layer for provider profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProviderProfileRepository()

    def get_by_user_id(self, user_id: str) -> ProviderProfile:
        profile = self.repo.get_by_user_id(self.db, user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Provider profile not found")
        return profile

    def find_all(
        self,
        city: Optional[str] = None,
        skills: Optional[list[str]] = None,
        level: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[ProviderProfile]:
        return self.repo.search(
            self.db, city=city, skills=skills, level=level, search=search, status=status
        )

    def _check_rate_range(self, profile: ProviderProfile):
        if (
            profile.hourly_rate_min is not None
            and profile.hourly_rate_max is not None
            and profile.hourly_rate_min > profile.hourly_rate_max
        ):
            raise HTTPException(
                status_code=400, detail="hourlyRateMin cannot be greater than hourlyRateMax"
            )

    def _save(self, profile: ProviderProfile) -> ProviderProfile:
        self._check_rate_range(profile)
        previous = profile.profile_status
        profile.profile_status = compute_profile_status(profile)
        if previous and previous != profile.profile_status:
            logger.info(f"📊 Profile {profile.id} status {previous} -> {profile.profile_status}")
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def create_or_update(self, user: User, data: ProviderProfileUpsert) -> ProviderProfile:
        """Create the caller's profile (or update it) and flag them as a provider"""
        user.is_provider = True
        values = to_columns(data)

        profile = self.repo.get_by_user_id(self.db, user.id)
        if profile:
            self.repo.apply(profile, **values)
        else:
            logger.info(f"📥 Creating provider profile for user {user.id}")
            profile = self.repo.create(self.db, user.id, profile_status=PROFILE_DRAFT, **values)
            self.db.flush()

        return self._save(profile)

    def update(self, user: User, data: ProviderProfileUpsert) -> ProviderProfile:
        profile = self.get_by_user_id(user.id)
        self.repo.apply(profile, **to_columns(data))
        return self._save(profile)

    def set_photo(self, user_id: str, url: str) -> Optional[ProviderProfile]:
        """Point the profile photo at an uploaded file, when the user has a profile"""
        profile = self.repo.get_by_user_id(self.db, user_id)
        if not profile:
            return None
        profile.photo = url
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def delete(self, user: User) -> dict:
        profile = self.get_by_user_id(user.id)
        self.db.delete(profile)
        user.is_provider = False
        self.db.commit()
        logger.info(f"🗑️ Provider profile deleted for user {user.id}")
        return {"message": "Provider profile deleted successfully"}

    def set_status(self, user_id: str, status: str, admin: User) -> ProviderProfile:
        """Admin moderation: the given status is stored verbatim"""
        profile = self.get_by_user_id(user_id)
        logger.info(
            f"📊 Admin {admin.id} set profile {profile.id} status {profile.profile_status} -> {status}"
        )
        profile.profile_status = status
        self.db.commit()
        self.db.refresh(profile)
        return profile
