"""Notification domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...shared.schemas import ORMSchema


class NotificationResponse(ORMSchema):
    id: str
    userId: str
    type: str
    title: str
    message: str
    read: bool
    sessionId: Optional[str] = None
    bookingId: Optional[str] = None
    createdAt: datetime


class SuccessResponse(BaseModel):
    success: bool
