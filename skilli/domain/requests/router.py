"""Request router - FastAPI endpoints for client requests"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.pagination import Page, PaginationParams
from ...shared.schemas import MessageResponse
from .schemas import RequestCreate, RequestDetail, RequestResponse, RequestType, RequestUpdate
from .service import RequestService

router = APIRouter(prefix="/requests", tags=["Requests"])


def get_request_service(db: Session = Depends(get_db)) -> RequestService:
    """Dependency injection for RequestService"""
    return RequestService(db)


@router.post("", response_model=RequestResponse, status_code=201)
async def create_request(
    data: RequestCreate,
    current_user: User = Depends(get_current_user),
    service: RequestService = Depends(get_request_service),
):
    return service.create_request(data, current_user)


@router.get("", response_model=Page[RequestResponse])
async def list_requests(
    pagination: PaginationParams = Depends(),
    status: Literal["open", "in_progress", "completed", "cancelled", "all"] = Query(
        "open", description="'all' disables the filter"
    ),
    requestType: Optional[RequestType] = Query(None),
    skill: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    minBudget: Optional[float] = Query(None, ge=0),
    maxBudget: Optional[float] = Query(None, ge=0),
    service: RequestService = Depends(get_request_service),
):
    """Paginated request board, newest first (open requests by default)"""
    items, meta = service.get_all_requests(
        pagination,
        status=None if status == "all" else status,
        request_type=requestType,
        skill=skill,
        location=location,
        min_budget=minBudget,
        max_budget=maxBudget,
    )
    return {"items": items, "pagination": meta}


@router.get("/me", response_model=list[RequestResponse])
async def my_requests(
    current_user: User = Depends(get_current_user),
    service: RequestService = Depends(get_request_service),
):
    return service.get_my_requests(current_user)


@router.get("/{request_id}", response_model=RequestDetail)
async def get_request(request_id: str, service: RequestService = Depends(get_request_service)):
    """A request with its offers, newest first"""
    return service.get_request(request_id)


@router.patch("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: str,
    data: RequestUpdate,
    current_user: User = Depends(get_current_user),
    service: RequestService = Depends(get_request_service),
):
    return service.update_request(request_id, data, current_user)


@router.patch("/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    service: RequestService = Depends(get_request_service),
):
    return service.cancel_request(request_id, current_user)


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    service: RequestService = Depends(get_request_service),
):
    return service.delete_request(request_id, current_user)
