"""Post domain schemas"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.schemas import TimestampedSchema, UserWithProfile
from ...shared.validators import validate_string_list


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    skills: list[str] = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Content cannot be empty")
        return v.strip()

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v):
        cleaned = validate_string_list(v)
        if not cleaned:
            raise ValueError("At least one skill is required")
        return cleaned


class PostResponse(TimestampedSchema):
    id: str
    authorId: str
    content: str
    skills: list[str] = []
    category: Optional[str] = None
    likeCount: int = 0
    author: UserWithProfile
    isLiked: bool = False
