"""Auth router - register, login, token refresh and logout"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import auth_rate_limiter
from ...shared.schemas import MessageResponse
from ..users.schemas import UserResponse
from .schemas import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest, TokenPair
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    _: None = Depends(auth_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return service.register(data)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(auth_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return service.login(data)


@router.post("/refresh", response_model=TokenPair)
async def refresh(data: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    return service.refresh(data.refreshToken)


@router.post("/logout", response_model=MessageResponse)
async def logout(data: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    return service.logout(data.refreshToken)


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
