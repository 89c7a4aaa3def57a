"""User and authentication schemas"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from tabletop.schemas.common import PatchModel


class UserCreate(BaseModel):
    """Registration payload"""
    username: str = Field(..., min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_-]+$')
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('username')
    @classmethod
    def username_lowercase(cls, v):
        return v.lower()

    @field_validator('email')
    @classmethod
    def email_lowercase(cls, v):
        return v.lower()


class UserLogin(BaseModel):
    """User login schema"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def email_lowercase(cls, v):
        return v.lower()


class UserUpdate(PatchModel):
    """Profile patch; only fields sent are changed"""
    username: str = Field(None, min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_-]+$')
    email: EmailStr = None

    @field_validator('username', 'email')
    @classmethod
    def lowercase(cls, v):
        return v.lower() if v is not None else v


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class AccountDelete(BaseModel):
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User response schema"""
    id: UUID
    username: str
    email: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class TokenPair(BaseModel):
    """Access token plus its refresh credential"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, max_length=128)
