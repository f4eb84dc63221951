"""Provider profile schemas - onboarding payloads and responses"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.schemas import ORMSchema, UserSummary
from ...shared.validators import (
    validate_cities,
    validate_city,
    validate_education_level,
    validate_string_list,
)

TeachingFormat = Literal["ONLINE", "IN_PERSON", "BOTH"]
ExperienceLevel = Literal[
    "STUDENT", "ENGINEERING_STUDENT", "JUNIOR_ENGINEER", "TEACHER", "FREELANCER", "EXPERT"
]
HourlyRateType = Literal["BASIC", "STANDARD", "PREMIUM", "CUSTOM"]
ProfileStatus = Literal["DRAFT", "PENDING_REVIEW", "APPROVED", "SUSPENDED"]


class ProviderProfileUpsert(BaseModel):
    """Schema for creating or updating a provider profile (all fields optional)"""

    bio: Optional[str] = Field(None, max_length=2000)
    photo: Optional[str] = None
    city: Optional[str] = None
    languages: Optional[list[str]] = None
    level: Optional[str] = None
    skills: Optional[list[str]] = None
    categories: Optional[list[str]] = None
    teachingFormat: Optional[TeachingFormat] = None
    experienceLevel: Optional[ExperienceLevel] = None
    hourlyRateType: Optional[HourlyRateType] = None
    hourlyRateMin: Optional[float] = Field(None, ge=0)
    hourlyRateMax: Optional[float] = Field(None, ge=0)
    cities: Optional[list[str]] = None
    availability: Optional[str] = None
    studyYear: Optional[str] = None
    onboardingCompleted: Optional[bool] = None

    @field_validator("city")
    @classmethod
    def validate_city(cls, v):
        return validate_city(v)

    @field_validator("cities")
    @classmethod
    def validate_cities(cls, v):
        return validate_cities(validate_string_list(v))

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        return validate_education_level(v)

    @field_validator("languages", "skills", "categories")
    @classmethod
    def clean_lists(cls, v):
        return validate_string_list(v)

    @model_validator(mode="after")
    def check_rate_range(self):
        if (
            self.hourlyRateMin is not None
            and self.hourlyRateMax is not None
            and self.hourlyRateMin > self.hourlyRateMax
        ):
            raise ValueError("hourlyRateMin cannot be greater than hourlyRateMax")
        return self


class ProfileStatusUpdate(BaseModel):
    profileStatus: ProfileStatus


class ProviderProfileResponse(ORMSchema):
    id: str
    userId: str
    bio: Optional[str] = None
    photo: Optional[str] = None
    city: Optional[str] = None
    languages: list[str] = []
    level: Optional[str] = None
    skills: list[str] = []
    categories: list[str] = []
    teachingFormat: Optional[str] = None
    experienceLevel: Optional[str] = None
    hourlyRateType: Optional[str] = None
    hourlyRateMin: Optional[float] = None
    hourlyRateMax: Optional[float] = None
    cities: list[str] = []
    availability: Optional[str] = None
    studyYear: Optional[str] = None
    onboardingCompleted: bool = False
    profileStatus: str
    isPhoneVerified: bool = False
    isEmailVerified: bool = False
    rating: float = 0
    totalRatings: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ProviderUser(UserSummary):
    phone: Optional[str] = None
    createdAt: Optional[datetime] = None


class ProviderProfileWithUser(ProviderProfileResponse):
    user: ProviderUser
