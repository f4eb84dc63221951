"""User service - Business logic for user accounts"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...security_utils import hash_password, verify_password
from .repository import UserRepository
from .schemas import UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def create(self, email: str, password: str, name: str, phone: Optional[str] = None) -> User:
        """Register a new account; emails are unique case-insensitively"""
        email = email.lower()
        if self.repo.get_by_email(self.db, email):
            logger.warning(f"⚠️ Registration refused, email already in use: {email}")
            raise HTTPException(status_code=409, detail="Email already registered")

        user = self.repo.create(
            self.db,
            email=email,
            password_hash=hash_password(password),
            name=name,
            phone=phone,
        )
        logger.info(f"✅ New user created: {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.repo.get_by_email(self.db, email)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def get_by_id(self, user_id: str) -> User:
        user = self.repo.get_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def update(self, user: User, data: UserUpdate) -> User:
        return self.repo.update(self.db, user, name=data.name, phone=data.phone)

    def become_provider(self, user: User) -> User:
        if user.is_provider:
            return user
        logger.info(f"📥 User {user.id} became a provider")
        return self.repo.update(self.db, user, is_provider=True)
