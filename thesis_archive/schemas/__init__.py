from thesis_archive.schemas.common import CamelModel, MessageResponse
from thesis_archive.schemas.thesis import (
    Person,
    ThesisCreate,
    ThesisUpdate,
    ThesisResponse,
    ThesisPage,
    ThesisFilters,
    ThesisActionResponse,
)
from thesis_archive.schemas.user import UserResponse, ManagedUserCreate, ManagedUserUpdate
from thesis_archive.schemas.auth import LoginRequest, LoginResponse, UsernameUpdate, PasswordUpdate
from thesis_archive.schemas.program import ProgramCreate, ProgramUpdate, ProgramResponse
from thesis_archive.schemas.settings import SettingsResponse, SettingsUpdate

__all__ = [
    "CamelModel",
    "MessageResponse",
    "Person",
    "ThesisCreate",
    "ThesisUpdate",
    "ThesisResponse",
    "ThesisPage",
    "ThesisFilters",
    "ThesisActionResponse",
    "UserResponse",
    "ManagedUserCreate",
    "ManagedUserUpdate",
    "LoginRequest",
    "LoginResponse",
    "UsernameUpdate",
    "PasswordUpdate",
    "ProgramCreate",
    "ProgramUpdate",
    "ProgramResponse",
    "SettingsResponse",
    "SettingsUpdate",
]
