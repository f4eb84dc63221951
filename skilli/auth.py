import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .models import User
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is answered with 401 instead of 403
security = HTTPBearer(auto_error=False)

NOT_AUTHENTICATED = (
    "Not authenticated. Please provide a valid Bearer token in the Authorization header."
)


def _load_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).options(joinedload(User.profile)).filter(User.id == user_id).first()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""
    if not credentials:
        logger.debug("❌ No credentials provided")
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)

    payload = decode_access_token(credentials.credentials)
    if not payload:
        logger.info("ℹ️ Rejected invalid or expired access token")
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = _load_user(db, payload["sub"])
    if not user:
        logger.warning(f"⚠️ Token subject {payload['sub']} no longer exists")
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Same as get_current_user but anonymous callers get None instead of 401"""
    if not credentials:
        return None
    payload = decode_access_token(credentials.credentials)
    if not payload:
        return None
    return _load_user(db, payload["sub"])


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning(f"⚠️ User {user.id} attempted an admin-only operation")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
