"""Session router - FastAPI endpoints for sessions"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.schemas import MessageResponse
from ...shared.validators import split_csv
from .schemas import SessionCreate, SessionDetail, SessionUpdate, SessionWithProvider
from .service import SessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    """Dependency injection for SessionService"""
    return SessionService(db)


@router.post("", response_model=SessionDetail, status_code=201)
async def create_session(
    data: SessionCreate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Schedule a session (providers only)"""
    return service.create_session(data, current_user)


@router.get("", response_model=list[SessionWithProvider])
async def list_sessions(
    skills: Optional[str] = Query(None, description="Comma separated, any match"),
    city: Optional[str] = Query(None),
    isOnline: Optional[bool] = Query(None),
    minPrice: Optional[float] = Query(None, ge=0),
    maxPrice: Optional[float] = Query(None, ge=0),
    status: Optional[str] = Query(None),
    providerId: Optional[str] = Query(None),
    service: SessionService = Depends(get_session_service),
):
    """Public session search, soonest first"""
    return service.find_all(
        skills=split_csv(skills),
        city=city,
        is_online=isOnline,
        min_price=minPrice,
        max_price=maxPrice,
        status=status,
        provider_id=providerId,
    )


@router.get("/my-sessions", response_model=list[SessionWithProvider])
async def my_sessions(
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return service.get_provider_sessions(current_user)


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(session_id: str, service: SessionService = Depends(get_session_service)):
    return service.get_session(session_id)


@router.put("/{session_id}", response_model=SessionDetail)
async def update_session(
    session_id: str,
    data: SessionUpdate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return service.update_session(session_id, data, current_user)


@router.delete("/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return service.delete_session(session_id, current_user)
