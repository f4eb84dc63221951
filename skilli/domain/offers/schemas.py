"""Offer domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.dates import to_naive_utc
from ...shared.schemas import TimestampedSchema, UserWithProfile
from ...shared.validators import validate_uuid_field
from ..requests.schemas import RequestResponse


class OfferCreate(BaseModel):
    """Schema for a provider's bid on a request"""

    requestId: str
    message: str = Field(..., min_length=1, max_length=1000)
    price: float = Field(..., ge=0)
    duration: int = Field(..., ge=1)
    firstAvailableDate: Optional[datetime] = None

    @field_validator("requestId")
    @classmethod
    def validate_request_id(cls, v):
        return validate_uuid_field(v)

    @field_validator("firstAvailableDate")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class OfferUpdate(BaseModel):
    """Status is not updatable here; use accept/reject"""

    message: Optional[str] = Field(None, min_length=1, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=1)
    firstAvailableDate: Optional[datetime] = None

    @field_validator("firstAvailableDate")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class OfferResponse(TimestampedSchema):
    id: str
    requestId: str
    providerId: str
    message: str
    price: float
    duration: int
    firstAvailableDate: Optional[datetime] = None
    status: str
    provider: UserWithProfile


class OfferDetail(OfferResponse):
    request: RequestResponse
