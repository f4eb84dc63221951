"""
Auth service - registration, login and the access/refresh token pair

Access tokens are short-lived JWTs. Refresh tokens are opaque random strings;
only their keyed hash is persisted and each one is single-use: refreshing
deletes the presented token and stores its replacement.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import JWT_REFRESH_EXPIRES_IN
from ...models import RefreshToken, User
from ...security_utils import (
    create_access_token,
    generate_refresh_token,
    hash_token,
    parse_duration,
)
from ...shared.dates import utcnow
from ..users.repository import UserRepository
from ..users.service import UserService
from .repository import RefreshTokenRepository
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = "Invalid refresh token"


class AuthService:
    """Service layer for authentication"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RefreshTokenRepository()
        self.users = UserService(db)

    def _issue_tokens(self, user: User) -> dict:
        """New access token plus a freshly stored refresh token"""
        refresh_token = generate_refresh_token()
        self.repo.create(
            self.db,
            user_id=user.id,
            token_hash=hash_token(refresh_token),
            expires_at=utcnow() + parse_duration(JWT_REFRESH_EXPIRES_IN),
        )
        return {
            "accessToken": create_access_token(user.id, user.email),
            "refreshToken": refresh_token,
        }

    def register(self, data: RegisterRequest) -> dict:
        user = self.users.create(
            email=data.email, password=data.password, name=data.name, phone=data.phone
        )
        tokens = self._issue_tokens(user)
        return {"user": UserRepository.get_by_id(self.db, user.id), **tokens}

    def login(self, data: LoginRequest) -> dict:
        user = self.users.authenticate(data.email, data.password)
        if not user:
            logger.warning(f"⚠️ Failed login attempt for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        # Opportunistic cleanup of this user's stale tokens
        self.repo.delete_expired(self.db, user.id, utcnow())
        tokens = self._issue_tokens(user)
        logger.info(f"✅ User logged in: {user.id}")
        return {"user": user, **tokens}

    def refresh(self, refresh_token: str) -> dict:
        """Rotate a refresh token: the presented one is consumed"""
        token_hash = hash_token(refresh_token)
        stored = self.repo.get_by_hash(self.db, token_hash)
        if not stored:
            logger.info("ℹ️ Unknown refresh token presented")
            raise HTTPException(status_code=401, detail=INVALID_REFRESH_TOKEN)

        if stored.expires_at < utcnow():
            logger.info(f"ℹ️ Expired refresh token presented for user {stored.user_id}")
            self.repo.delete_by_hash(self.db, token_hash)
            raise HTTPException(status_code=401, detail=INVALID_REFRESH_TOKEN)

        user = UserRepository.get_by_id(self.db, stored.user_id)
        if not user:
            raise HTTPException(status_code=401, detail=INVALID_REFRESH_TOKEN)

        new_token = generate_refresh_token()
        try:
            # A concurrent refresh may have consumed it since the read
            if self.repo.consume(self.db, token_hash) != 1:
                logger.info(f"ℹ️ Refresh token for user {user.id} was already used")
                raise HTTPException(status_code=401, detail=INVALID_REFRESH_TOKEN)
            self.db.add(
                RefreshToken(
                    user_id=user.id,
                    token_hash=hash_token(new_token),
                    expires_at=utcnow() + parse_duration(JWT_REFRESH_EXPIRES_IN),
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.debug(f"🔄 Refresh token rotated for user {user.id}")
        return {
            "accessToken": create_access_token(user.id, user.email),
            "refreshToken": new_token,
        }

    def logout(self, refresh_token: str) -> dict:
        self.repo.delete_by_hash(self.db, hash_token(refresh_token))
        return {"message": "Logged out successfully"}
