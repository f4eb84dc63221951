"""Booking router - FastAPI endpoints for bookings"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import BookingCreate, BookingDetail, RateSessionRequest
from .service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.post("", response_model=BookingDetail, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.create_booking(data, current_user)


@router.get("/my-bookings", response_model=list[BookingDetail])
async def my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings made by the current user"""
    return service.get_my_bookings(current_user)


@router.get("/provider-bookings", response_model=list[BookingDetail])
async def provider_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings on the current user's sessions"""
    return service.get_provider_bookings(current_user)


@router.put("/{booking_id}/cancel", response_model=BookingDetail)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.cancel(booking_id, current_user)


@router.put("/{booking_id}/complete", response_model=BookingDetail)
async def complete_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.complete(booking_id, current_user)


@router.put("/{booking_id}/rate", response_model=BookingDetail)
async def rate_session(
    booking_id: str,
    data: RateSessionRequest,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.rate_session(booking_id, data, current_user)
