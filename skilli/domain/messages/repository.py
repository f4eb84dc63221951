"""Messaging repository - Database operations for conversations and messages"""

from typing import Optional

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Query, Session, joinedload

from ...models import Conversation, Message, User


def ordered_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Conversations are stored once per pair, smaller id first"""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class ConversationRepository:
    """Repository for conversation and message database operations"""

    @staticmethod
    def _conversations(db: Session) -> Query:
        return db.query(Conversation).options(
            joinedload(Conversation.user1).joinedload(User.profile),
            joinedload(Conversation.user2).joinedload(User.profile),
        )

    @staticmethod
    def get_by_id(db: Session, conversation_id: str) -> Optional[Conversation]:
        return (
            ConversationRepository._conversations(db)
            .filter(Conversation.id == conversation_id)
            .first()
        )

    @staticmethod
    def get_for_participant(db: Session, conversation_id: str, user_id: str) -> Optional[Conversation]:
        return (
            db.query(Conversation)
            .filter(
                Conversation.id == conversation_id,
                or_(Conversation.user1_id == user_id, Conversation.user2_id == user_id),
            )
            .first()
        )

    @staticmethod
    def get_for_pair(db: Session, user_a: str, user_b: str) -> Optional[Conversation]:
        user1_id, user2_id = ordered_pair(user_a, user_b)
        return (
            ConversationRepository._conversations(db)
            .filter(Conversation.user1_id == user1_id, Conversation.user2_id == user2_id)
            .first()
        )

    @staticmethod
    def create(db: Session, user_a: str, user_b: str) -> Conversation:
        user1_id, user2_id = ordered_pair(user_a, user_b)
        conversation = Conversation(user1_id=user1_id, user2_id=user2_id)
        db.add(conversation)
        db.commit()
        return conversation

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> list[Conversation]:
        return (
            ConversationRepository._conversations(db)
            .filter(or_(Conversation.user1_id == user_id, Conversation.user2_id == user_id))
            .order_by(
                Conversation.last_message_at.desc().nulls_last(),
                Conversation.created_at.desc(),
            )
            .all()
        )

    @staticmethod
    def add_message(db: Session, **data) -> Message:
        message = Message(**data)
        db.add(message)
        return message

    @staticmethod
    def get_message(db: Session, message_id: str) -> Optional[Message]:
        return (
            db.query(Message)
            .options(joinedload(Message.sender).joinedload(User.profile))
            .filter(Message.id == message_id)
            .first()
        )

    @staticmethod
    def list_messages(db: Session, conversation_id: str) -> list[Message]:
        return (
            db.query(Message)
            .options(joinedload(Message.sender).joinedload(User.profile))
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
            .all()
        )

    @staticmethod
    def last_message(db: Session, conversation_id: str) -> Optional[Message]:
        return (
            db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc())
            .first()
        )

    @staticmethod
    def mark_read(db: Session, conversation_id: str, receiver_id: str) -> int:
        result = db.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.receiver_id == receiver_id,
                Message.read.is_(False),
            )
            .values(read=True)
        )
        db.commit()
        return result.rowcount

    @staticmethod
    def unread_by_conversation(db: Session, receiver_id: str) -> dict[str, int]:
        rows = (
            db.query(Message.conversation_id, func.count(Message.id))
            .filter(Message.receiver_id == receiver_id, Message.read.is_(False))
            .group_by(Message.conversation_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def count_unread(db: Session, receiver_id: str) -> int:
        return (
            db.query(Message)
            .filter(Message.receiver_id == receiver_id, Message.read.is_(False))
            .count()
        )
