"""Base schemas reused across domains"""

from datetime import datetime
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_snake


class ORMSchema(BaseModel):
    """
    Response schema read straight from ORM objects.

    Fields are declared in camelCase (the API's wire format) and read from the
    snake_case attributes of the SQLAlchemy models.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=AliasGenerator(validation_alias=to_snake),
    )


class MessageResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int


class UserSummary(ORMSchema):
    id: str
    name: str
    email: str


class PhotoSummary(ORMSchema):
    photo: Optional[str] = None


class UserWithPhoto(UserSummary):
    profile: Optional[PhotoSummary] = None


class ProfileSummary(ORMSchema):
    id: str
    bio: Optional[str] = None
    photo: Optional[str] = None
    city: Optional[str] = None
    skills: list[str] = []
    level: Optional[str] = None
    profileStatus: str
    rating: float = 0
    totalRatings: int = 0


class UserWithProfile(UserSummary):
    profile: Optional[ProfileSummary] = None


class TimestampedSchema(ORMSchema):
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


def to_columns(data: BaseModel, exclude_unset: bool = True) -> dict:
    """camelCase payload -> snake_case column values"""
    return {to_snake(key): value for key, value in data.model_dump(exclude_unset=exclude_unset).items()}
