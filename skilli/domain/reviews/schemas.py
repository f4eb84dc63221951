"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import ORMSchema, TimestampedSchema, UserSummary, UserWithPhoto
from ...shared.validators import validate_uuid_field


class ReviewCreate(BaseModel):
    sessionId: str
    providerId: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator("sessionId", "providerId")
    @classmethod
    def validate_ids(cls, v):
        return validate_uuid_field(v)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewSession(ORMSchema):
    id: str
    title: str
    date: datetime


class ReviewResponse(TimestampedSchema):
    id: str
    reviewerId: str
    providerId: str
    sessionId: str
    rating: int
    comment: Optional[str] = None
    reviewer: UserWithPhoto
    provider: UserSummary
    session: ReviewSession


class CanReviewResponse(BaseModel):
    canReview: bool
    reason: Optional[str] = None
    review: Optional[ReviewResponse] = None
