from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.database import get_db
from thesis_archive.core.rate_limiter import login_rate_limit
from thesis_archive.models.user import User
from thesis_archive.modules.auth.dependencies import get_current_user
from thesis_archive.schemas.auth import LoginRequest, LoginResponse, PasswordUpdate, UsernameUpdate
from thesis_archive.schemas.common import MessageResponse
from thesis_archive.schemas.user import UserResponse
from thesis_archive.services import auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange username/password for a bearer token"""
    user = await auth_service.authenticate(db, payload.username, payload.password, payload.login_type)
    return LoginResponse(token=auth_service.issue_token(user), user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)


@router.put("/username", response_model=UserResponse)
async def update_username(
    payload: UsernameUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.change_username(db, current_user, payload.username)
    return UserResponse.model_validate(user)


@router.put("/password", response_model=MessageResponse)
async def update_password(
    payload: PasswordUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully")
