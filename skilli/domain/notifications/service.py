"""
Notification service
In-app notifications are rows read back by the client; other domains call the
notify_* helpers after their own writes have been committed.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

# Notification types
TYPE_BOOKING = "booking"
TYPE_REMINDER = "reminder"
TYPE_RATING = "rating"
TYPE_OFFER = "offer"
TYPE_OFFER_ACCEPTED = "offer_accepted"
TYPE_MESSAGE = "message"
TYPE_UPDATE = "update"

MESSAGE_PREVIEW_LENGTH = 50


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    # ------------------------------------------------------------------
    # Reads and mutations on behalf of the recipient
    # ------------------------------------------------------------------

    def get_user_notifications(self, user_id: str) -> list[Notification]:
        return self.repo.list_for_user(self.db, user_id)

    def get_unread_count(self, user_id: str) -> int:
        return self.repo.count_unread(self.db, user_id)

    def _get_own(self, notification_id: str, user_id: str) -> Notification:
        notification = self.repo.get_for_user(self.db, notification_id, user_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return notification

    def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self._get_own(notification_id, user_id)
        notification.read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        count = self.repo.mark_all_read(self.db, user_id)
        logger.info(f"✅ Marked {count} notifications read for user {user_id}")
        return count

    def delete_notification(self, notification_id: str, user_id: str) -> None:
        notification = self._get_own(notification_id, user_id)
        self.repo.delete(self.db, notification)

    # ------------------------------------------------------------------
    # Internal helpers called by other domains
    # ------------------------------------------------------------------

    def create_notification(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        session_id: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> Notification:
        notification = self.repo.create(
            self.db,
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            session_id=session_id,
            booking_id=booking_id,
        )
        logger.debug(f"🔔 {type} notification created for user {user_id}")
        return notification

    def notify_provider_of_booking(
        self, provider_id: str, session_title: str, session_id: str, booking_id: str
    ) -> Notification:
        return self.create_notification(
            user_id=provider_id,
            type=TYPE_BOOKING,
            title="Nouvelle réservation",
            message=f'Quelqu\'un a réservé votre session "{session_title}"',
            session_id=session_id,
            booking_id=booking_id,
        )

    def notify_provider_of_rating(
        self, provider_id: str, rating: int, session_id: str, booking_id: Optional[str] = None
    ) -> Notification:
        stars = "⭐" * rating
        return self.create_notification(
            user_id=provider_id,
            type=TYPE_RATING,
            title="Nouvelle note reçue",
            message=f"Un participant a noté votre session: {stars}",
            session_id=session_id,
            booking_id=booking_id,
        )

    def notify_requester_of_offer(
        self, requester_id: str, provider_name: str, request_title: str
    ) -> Notification:
        return self.create_notification(
            user_id=requester_id,
            type=TYPE_OFFER,
            title="Nouvelle offre reçue",
            message=f'{provider_name} a soumis une offre pour votre demande "{request_title}"',
        )

    def notify_offer_accepted(
        self,
        provider_id: str,
        requester_id: str,
        provider_name: str,
        requester_name: str,
        request_title: str,
    ) -> list[Notification]:
        """One notification for each side of the accepted offer"""
        return [
            self.create_notification(
                user_id=provider_id,
                type=TYPE_OFFER_ACCEPTED,
                title="Offre acceptée",
                message=f'Votre offre pour "{request_title}" a été acceptée par {requester_name}',
            ),
            self.create_notification(
                user_id=requester_id,
                type=TYPE_OFFER_ACCEPTED,
                title="Offre acceptée",
                message=f'Vous avez accepté l\'offre de {provider_name} pour "{request_title}"',
            ),
        ]

    def notify_receiver_of_message(
        self, receiver_id: str, sender_name: str, text: str
    ) -> Notification:
        preview = text[:MESSAGE_PREVIEW_LENGTH]
        if len(text) > MESSAGE_PREVIEW_LENGTH:
            preview += "..."
        return self.create_notification(
            user_id=receiver_id,
            type=TYPE_MESSAGE,
            title="Nouveau message",
            message=f"{sender_name}: {preview}",
        )
