"""Post router - FastAPI endpoints for provider posts"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import User
from ...shared.pagination import Page, PaginationParams
from ...shared.schemas import MessageResponse
from .schemas import PostCreate, PostResponse
from .service import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    """Dependency injection for PostService"""
    return PostService(db)


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    """Publish a post (providers only)"""
    return service.create_post(data, current_user)


@router.get("", response_model=Page[PostResponse])
async def list_posts(
    pagination: PaginationParams = Depends(),
    skill: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    authorId: Optional[str] = Query(None),
    viewer: Optional[User] = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    """Feed, newest first; isLiked reflects the caller when authenticated"""
    items, meta = service.get_all_posts(
        pagination, viewer=viewer, skill=skill, category=category, author_id=authorId
    )
    return {"items": items, "pagination": meta}


@router.get("/me", response_model=list[PostResponse])
async def my_posts(
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.get_my_posts(current_user)


@router.get("/user/{user_id}", response_model=list[PostResponse])
async def user_posts(
    user_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    return service.get_user_posts(user_id, viewer)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    return service.get_post(post_id, viewer)


@router.post("/{post_id}/like", response_model=MessageResponse)
async def like_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.like_post(post_id, current_user)


@router.delete("/{post_id}/unlike", response_model=MessageResponse)
async def unlike_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.unlike_post(post_id, current_user)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.delete_post(post_id, current_user)
