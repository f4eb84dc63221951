"""User domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import ORMSchema
from ...shared.validators import validate_moroccan_phone
from ..provider_profiles.schemas import ProviderProfileResponse


class UserUpdate(BaseModel):
    """Schema for updating the current user"""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_moroccan_phone(v)


class UserResponse(ORMSchema):
    """A user as returned to clients (never includes the password hash)"""

    id: str
    email: str
    name: str
    phone: Optional[str] = None
    isProvider: bool
    isClient: bool
    isAdmin: bool = False
    createdAt: Optional[datetime] = None
    profile: Optional[ProviderProfileResponse] = None
