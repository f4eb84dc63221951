"""Auth domain schemas"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ...shared.validators import validate_moroccan_phone
from ..users.schemas import UserResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=255)
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_moroccan_phone(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refreshToken: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    accessToken: str
    refreshToken: str


class AuthResponse(TokenPair):
    user: UserResponse
