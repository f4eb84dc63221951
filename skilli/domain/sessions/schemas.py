"""Session domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.dates import to_naive_utc
from ...shared.schemas import ORMSchema, TimestampedSchema, UserSummary, UserWithProfile
from ...shared.validators import validate_string_list

SessionStatus = Literal["scheduled", "completed", "cancelled"]


class SessionCreate(BaseModel):
    """Schema for scheduling a new session"""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    skills: list[str] = []
    date: datetime
    duration: int = Field(..., ge=15, description="Minutes")
    isOnline: bool
    location: Optional[str] = Field(None, max_length=255)
    price: float = Field(..., ge=0, description="MAD")
    maxParticipants: int = Field(..., ge=1)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v):
        return validate_string_list(v)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class SessionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    skills: Optional[list[str]] = None
    date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=15)
    isOnline: Optional[bool] = None
    location: Optional[str] = Field(None, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    maxParticipants: Optional[int] = Field(None, ge=1)
    status: Optional[SessionStatus] = None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v):
        return validate_string_list(v)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class SessionBookingSummary(ORMSchema):
    id: str
    status: str
    client: UserSummary


class SessionResponse(TimestampedSchema):
    id: str
    providerId: str
    title: str
    description: str
    skills: list[str] = []
    date: datetime
    duration: int
    isOnline: bool
    location: Optional[str] = None
    price: float
    maxParticipants: int
    status: str
    rating: float = 0
    totalRatings: int = 0
    bookingCount: int = 0


class SessionWithProvider(SessionResponse):
    provider: UserWithProfile


class SessionDetail(SessionWithProvider):
    bookings: list[SessionBookingSummary] = []
