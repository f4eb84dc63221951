"""Review router - FastAPI endpoints for reviews"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import CanReviewResponse, ReviewCreate, ReviewResponse, ReviewUpdate
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Review a session the caller attended"""
    return service.create_review(data, current_user)


@router.patch("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: str,
    data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return service.update_review(review_id, data, current_user)


@router.get("/provider/{provider_id}", response_model=list[ReviewResponse])
async def get_provider_reviews(
    provider_id: str, service: ReviewService = Depends(get_review_service)
):
    return service.get_provider_reviews(provider_id)


@router.get("/session/{session_id}", response_model=list[ReviewResponse])
async def get_session_reviews(session_id: str, service: ReviewService = Depends(get_review_service)):
    return service.get_session_reviews(session_id)


@router.get("/me", response_model=list[ReviewResponse])
async def get_my_reviews(
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return service.get_my_reviews(current_user)


@router.get("/can-review/{session_id}", response_model=CanReviewResponse)
async def can_review(
    session_id: str,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return service.can_review_session(session_id, current_user)
