"""Messaging domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import ORMSchema, UserWithPhoto
from ...shared.validators import validate_uuid_field


class SendMessageRequest(BaseModel):
    receiverId: str
    # Blank text is answered with 400 by the service, not 422
    text: str = Field(..., max_length=5000)

    @field_validator("receiverId")
    @classmethod
    def validate_receiver(cls, v):
        return validate_uuid_field(v)


class ChatMessage(ORMSchema):
    id: str
    conversationId: str
    senderId: str
    receiverId: str
    text: str
    read: bool
    createdAt: datetime
    sender: Optional[UserWithPhoto] = None


class ConversationResponse(ORMSchema):
    id: str
    # to_snake would give user_1_id, the columns are user1_id
    user1Id: str = Field(validation_alias="user1_id")
    user2Id: str = Field(validation_alias="user2_id")
    user1: UserWithPhoto
    user2: UserWithPhoto
    lastMessageText: Optional[str] = None
    lastMessageAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ConversationSummary(ConversationResponse):
    """Inbox entry: the conversation seen from one participant"""

    otherUser: Optional[UserWithPhoto] = None
    lastMessage: Optional[ChatMessage] = None
    unreadCount: int = 0
