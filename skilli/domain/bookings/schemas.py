"""Booking domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import TimestampedSchema, UserSummary
from ...shared.validators import validate_uuid_field
from ..sessions.schemas import SessionWithProvider


class BookingCreate(BaseModel):
    sessionId: str

    @field_validator("sessionId")
    @classmethod
    def validate_session_id(cls, v):
        return validate_uuid_field(v)


class RateSessionRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=2000)


class BookingClient(UserSummary):
    phone: Optional[str] = None


class BookingResponse(TimestampedSchema):
    id: str
    sessionId: str
    clientId: str
    status: str
    paymentStatus: str
    amount: float
    rating: Optional[int] = None
    review: Optional[str] = None


class BookingDetail(BookingResponse):
    session: SessionWithProvider
    client: BookingClient
    createdAt: datetime
