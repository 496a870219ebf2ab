from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from thesis_archive.models.user import UserRole
from thesis_archive.schemas.common import CamelModel

MIN_PASSWORD_LENGTH = 6


class UserResponse(CamelModel):
    id: str
    username: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool = True
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class ManagedUserCreate(CamelModel):
    """Student or student assistant account created by an admin"""
    username: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    @field_validator("username", "first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ManagedUserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=3, max_length=255)
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    # Empty string keeps the current password
    password: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("username", "first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v or None
