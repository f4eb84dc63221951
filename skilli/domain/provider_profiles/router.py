"""Provider profile router - FastAPI endpoints for provider onboarding and discovery"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from ...shared.schemas import MessageResponse
from ...shared.validators import split_csv
from .schemas import (
    ProfileStatusUpdate,
    ProviderProfileResponse,
    ProviderProfileUpsert,
    ProviderProfileWithUser,
)
from .service import ProviderProfileService

router = APIRouter(prefix="/provider-profiles", tags=["Provider Profiles"])


def get_provider_profile_service(db: Session = Depends(get_db)) -> ProviderProfileService:
    """Dependency injection for ProviderProfileService"""
    return ProviderProfileService(db)


# ============================================================================
# CURRENT USER'S PROFILE
# ============================================================================


@router.post("", response_model=ProviderProfileResponse)
@router.post("/me", response_model=ProviderProfileResponse)
async def create_or_update_profile(
    data: ProviderProfileUpsert,
    current_user: User = Depends(get_current_user),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    """Create or update the caller's profile; the caller becomes a provider"""
    return service.create_or_update(current_user, data)


@router.get("/me", response_model=ProviderProfileWithUser)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    return service.get_by_user_id(current_user.id)


@router.put("", response_model=ProviderProfileResponse)
@router.patch("/me", response_model=ProviderProfileResponse)
async def update_profile(
    data: ProviderProfileUpsert,
    current_user: User = Depends(get_current_user),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    return service.update(current_user, data)


@router.delete("", response_model=MessageResponse)
@router.delete("/me", response_model=MessageResponse)
async def delete_profile(
    current_user: User = Depends(get_current_user),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    return service.delete(current_user)


# ============================================================================
# PUBLIC DISCOVERY
# ============================================================================


@router.get("", response_model=list[ProviderProfileWithUser])
async def list_profiles(
    city: Optional[str] = Query(None),
    skills: Optional[str] = Query(None, description="Comma separated, any match"),
    level: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    """Providers ordered by rating, e.g. ?city=Casablanca&skills=Kafka,React"""
    return service.find_all(
        city=city, skills=split_csv(skills), level=level, search=search, status=status
    )


@router.get("/{user_id}", response_model=ProviderProfileWithUser)
async def get_profile(
    user_id: str,
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    return service.get_by_user_id(user_id)


# ============================================================================
# MODERATION
# ============================================================================


@router.patch("/{user_id}/status", response_model=ProviderProfileResponse)
async def set_profile_status(
    user_id: str,
    data: ProfileStatusUpdate,
    admin: User = Depends(require_admin),
    service: ProviderProfileService = Depends(get_provider_profile_service),
):
    return service.set_status(user_id, data.profileStatus, admin)
