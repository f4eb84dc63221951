"""Offer router - FastAPI endpoints for offers"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.schemas import MessageResponse
from .schemas import OfferCreate, OfferDetail, OfferResponse, OfferUpdate
from .service import OfferService

router = APIRouter(prefix="/offers", tags=["Offers"])


def get_offer_service(db: Session = Depends(get_db)) -> OfferService:
    """Dependency injection for OfferService"""
    return OfferService(db)


@router.post("", response_model=OfferDetail, status_code=201)
async def create_offer(
    data: OfferCreate,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    """Submit an offer on someone else's request (providers only)"""
    return service.create_offer(data, current_user)


@router.get("/request/{request_id}", response_model=list[OfferResponse])
async def get_request_offers(
    request_id: str,
    _: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.get_request_offers(request_id)


@router.get("/me", response_model=list[OfferDetail])
async def get_my_offers(
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.get_my_offers(current_user)


@router.get("/{offer_id}", response_model=OfferDetail)
async def get_offer(
    offer_id: str,
    _: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.get_offer(offer_id)


@router.patch("/{offer_id}", response_model=OfferDetail)
async def update_offer(
    offer_id: str,
    data: OfferUpdate,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.update_offer(offer_id, data, current_user)


@router.patch("/{offer_id}/accept", response_model=OfferDetail)
async def accept_offer(
    offer_id: str,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    """Accept an offer: siblings are rejected and the request is completed atomically"""
    return service.accept_offer(offer_id, current_user)


@router.patch("/{offer_id}/reject", response_model=OfferDetail)
async def reject_offer(
    offer_id: str,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.reject_offer(offer_id, current_user)


@router.delete("/{offer_id}", response_model=MessageResponse)
async def delete_offer(
    offer_id: str,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service),
):
    return service.delete_offer(offer_id, current_user)
