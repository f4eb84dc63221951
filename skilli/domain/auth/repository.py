"""Refresh token repository"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import RefreshToken


class RefreshTokenRepository:
    """Repository for persisted refresh tokens (stored hashed)"""

    @staticmethod
    def create(db: Session, user_id: str, token_hash: str, expires_at: datetime) -> RefreshToken:
        row = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
        db.add(row)
        db.commit()
        return row

    @staticmethod
    def get_by_hash(db: Session, token_hash: str) -> Optional[RefreshToken]:
        return db.query(RefreshToken).filter(RefreshToken.token_hash == token_hash).first()

    @staticmethod
    def delete_by_hash(db: Session, token_hash: str) -> int:
        count = (
            db.query(RefreshToken)
            .filter(RefreshToken.token_hash == token_hash)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def consume(db: Session, token_hash: str) -> int:
        """Delete without committing; the caller commits with the replacement token"""
        return (
            db.query(RefreshToken)
            .filter(RefreshToken.token_hash == token_hash)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def delete_expired(db: Session, user_id: str, now: datetime) -> int:
        count = (
            db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
