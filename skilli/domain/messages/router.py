"""Messaging router - FastAPI endpoints for conversations and messages"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.schemas import CountResponse
from .schemas import ChatMessage, ConversationResponse, ConversationSummary, SendMessageRequest
from .service import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    """Dependency injection for MessageService"""
    return MessageService(db)


@router.get("/conversations", response_model=list[ConversationSummary])
async def list_conversations(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Inbox, most recent activity first"""
    return service.get_user_conversations(current_user)


@router.get("/conversations/{other_user_id}", response_model=ConversationResponse)
async def get_or_create_conversation(
    other_user_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.get_or_create_conversation(current_user.id, other_user_id)


@router.get("/unread/count", response_model=CountResponse)
async def unread_count(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return {"count": service.get_unread_count(current_user)}


@router.get("/{conversation_id}", response_model=list[ChatMessage])
async def get_conversation_messages(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Messages oldest first; incoming ones are marked read"""
    return service.get_conversation_messages(conversation_id, current_user)


@router.post("", response_model=ChatMessage, status_code=201)
async def send_message(
    data: SendMessageRequest,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.send_message(current_user, data.receiverId, data.text)
