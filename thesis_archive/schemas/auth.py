from typing import Literal, Optional

from pydantic import Field, field_validator

from thesis_archive.schemas.common import CamelModel
from thesis_archive.schemas.user import UserResponse, MIN_PASSWORD_LENGTH


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    # "student" admits students only, "admin" admits admins and assistants
    login_type: Optional[Literal["student", "admin"]] = None


class LoginResponse(CamelModel):
    token: str
    user: UserResponse


class UsernameUpdate(CamelModel):
    username: str = Field(..., min_length=3, max_length=255)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v


class PasswordUpdate(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
