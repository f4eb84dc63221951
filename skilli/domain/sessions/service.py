"""Session service - Business logic for provider-scheduled sessions"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import SkillSession, User
from ...shared.schemas import to_columns
from .repository import SessionRepository
from .schemas import SessionCreate, SessionUpdate

logger = logging.getLogger(__name__)


class SessionService:
    """Service layer for session business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SessionRepository()

    def get_session(self, session_id: str) -> SkillSession:
        session = self.repo.get_by_id(self.db, session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def _get_owned(self, session_id: str, user: User, action: str) -> SkillSession:
        session = self.get_session(session_id)
        if session.provider_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to {action} session {session_id}")
            raise HTTPException(status_code=403, detail=f"You can only {action} your own sessions")
        return session

    def create_session(self, data: SessionCreate, user: User) -> SkillSession:
        if not user.is_provider:
            raise HTTPException(status_code=403, detail="Only providers can create sessions")
        if not data.isOnline and not (data.location or "").strip():
            raise HTTPException(status_code=400, detail="Location is required for presential sessions")

        session = self.repo.create(self.db, user.id, **to_columns(data, exclude_unset=False))
        logger.info(f"✅ Session {session.id} scheduled by provider {user.id}")
        return self.get_session(session.id)

    def find_all(
        self,
        skills: Optional[list[str]] = None,
        city: Optional[str] = None,
        is_online: Optional[bool] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        status: Optional[str] = None,
        provider_id: Optional[str] = None,
    ) -> list[SkillSession]:
        return self.repo.search(
            self.db,
            skills=skills,
            city=city,
            is_online=is_online,
            min_price=min_price,
            max_price=max_price,
            status=status,
            provider_id=provider_id,
        )

    def get_provider_sessions(self, user: User) -> list[SkillSession]:
        return self.repo.list_for_provider(self.db, user.id)

    def update_session(self, session_id: str, data: SessionUpdate, user: User) -> SkillSession:
        session = self._get_owned(session_id, user, "update")
        updates = to_columns(data)

        is_online = updates.get("is_online", session.is_online)
        location = updates.get("location", session.location)
        if not is_online and not (location or "").strip():
            raise HTTPException(status_code=400, detail="Location is required for presential sessions")

        self.repo.update(self.db, session, **updates)
        return self.get_session(session_id)

    def delete_session(self, session_id: str, user: User) -> dict:
        session = self._get_owned(session_id, user, "delete")
        if session.booking_count > 0:
            raise HTTPException(status_code=400, detail="Cannot delete session with existing bookings")
        self.repo.delete(self.db, session)
        logger.info(f"🗑️ Session {session_id} deleted")
        return {"message": "Session deleted successfully"}
