"""
Messaging service - one-to-one conversations

Each pair of users shares a single conversation, created lazily the first time
either side opens it or sends a message. Clients poll for new messages; there
is no push channel.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Conversation, Message, User
from ...shared.dates import utcnow
from ...shared.schemas import UserWithPhoto
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .repository import ConversationRepository
from .schemas import ChatMessage, ConversationSummary

logger = logging.getLogger(__name__)


class MessageService:
    """Service layer for messaging business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ConversationRepository()
        self.users = UserRepository()
        self.notifications = NotificationService(db)

    def get_or_create_conversation(self, user_id: str, other_user_id: str) -> Conversation:
        if user_id == other_user_id:
            raise HTTPException(status_code=400, detail="Cannot create conversation with yourself")
        if not self.users.get_by_id(self.db, other_user_id):
            raise HTTPException(status_code=404, detail="User not found")

        conversation = self.repo.get_for_pair(self.db, user_id, other_user_id)
        if conversation:
            return conversation

        try:
            conversation = self.repo.create(self.db, user_id, other_user_id)
            logger.info(f"💬 Conversation {conversation.id} opened between {user_id} and {other_user_id}")
        except IntegrityError:
            # The other participant opened it concurrently
            self.db.rollback()
            logger.info(f"ℹ️ Conversation between {user_id} and {other_user_id} already created")

        return self.repo.get_for_pair(self.db, user_id, other_user_id)

    def get_user_conversations(self, user: User) -> list[ConversationSummary]:
        conversations = self.repo.list_for_user(self.db, user.id)
        unread = self.repo.unread_by_conversation(self.db, user.id)

        summaries = []
        for conversation in conversations:
            other = conversation.user2 if conversation.user1_id == user.id else conversation.user1
            last = self.repo.last_message(self.db, conversation.id)
            summaries.append(
                ConversationSummary.model_validate(conversation).model_copy(
                    update={
                        "otherUser": UserWithPhoto.model_validate(other),
                        "lastMessage": ChatMessage.model_validate(last) if last else None,
                        "unreadCount": unread.get(conversation.id, 0),
                    }
                )
            )
        return summaries

    def get_conversation_messages(self, conversation_id: str, user: User) -> list[ChatMessage]:
        conversation = self.repo.get_for_participant(self.db, conversation_id, user.id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found or access denied")

        # Serialize first so the caller sees which messages were still unread
        messages = [
            ChatMessage.model_validate(message)
            for message in self.repo.list_messages(self.db, conversation_id)
        ]
        marked = self.repo.mark_read(self.db, conversation_id, user.id)
        if marked:
            logger.debug(f"👀 {marked} messages marked read in {conversation_id}")
        return messages

    def send_message(self, sender: User, receiver_id: str, text: str) -> Message:
        if sender.id == receiver_id:
            raise HTTPException(status_code=400, detail="Cannot send message to yourself")
        if not text or not text.strip():
            raise HTTPException(status_code=400, detail="Message text cannot be empty")

        text = text.strip()
        conversation = self.get_or_create_conversation(sender.id, receiver_id)

        try:
            message = self.repo.add_message(
                self.db,
                conversation_id=conversation.id,
                sender_id=sender.id,
                receiver_id=receiver_id,
                text=text,
            )
            conversation.last_message_text = text
            conversation.last_message_at = utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.notifications.notify_receiver_of_message(receiver_id, sender.name, text)
        return self.repo.get_message(self.db, message.id)

    def get_unread_count(self, user: User) -> int:
        return self.repo.count_unread(self.db, user.id)
