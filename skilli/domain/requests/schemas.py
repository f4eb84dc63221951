"""Request domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import ORMSchema, TimestampedSchema, UserSummary, UserWithProfile
from ...shared.validators import validate_string_list

RequestType = Literal["online", "presential", "both"]
RequestStatus = Literal["open", "in_progress", "completed", "cancelled"]


class RequestCreate(BaseModel):
    """Schema for posting a new request"""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    skills: list[str] = Field(..., min_length=1)
    level: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    requestType: RequestType
    budgetMin: Optional[float] = Field(None, ge=0)
    budgetMax: Optional[float] = Field(None, ge=0)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v):
        return validate_string_list(v)


class RequestUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    skills: Optional[list[str]] = None
    level: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    requestType: Optional[RequestType] = None
    budgetMin: Optional[float] = Field(None, ge=0)
    budgetMax: Optional[float] = Field(None, ge=0)
    status: Optional[RequestStatus] = None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v):
        return validate_string_list(v)


class RequestResponse(TimestampedSchema):
    id: str
    requesterId: str
    title: str
    description: str
    skills: list[str] = []
    level: Optional[str] = None
    location: Optional[str] = None
    requestType: str
    budgetMin: Optional[float] = None
    budgetMax: Optional[float] = None
    status: str
    offerCount: int = 0
    requester: UserSummary


class RequestOffer(ORMSchema):
    """An offer as listed under its request"""

    id: str
    providerId: str
    message: str
    price: float
    duration: int
    firstAvailableDate: Optional[datetime] = None
    status: str
    createdAt: datetime
    provider: UserWithProfile


class RequestDetail(RequestResponse):
    offers: list[RequestOffer] = []
