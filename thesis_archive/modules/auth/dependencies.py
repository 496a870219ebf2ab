from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from thesis_archive.core.database import get_db
from thesis_archive.core.exceptions import AuthenticationError
from thesis_archive.core.logging_config import logger, set_user_id
from thesis_archive.core.security import decode_token
from thesis_archive.models.user import User
from thesis_archive.services import permissions

# auto_error=False so a missing header goes through our 401 envelope
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user or fail with 401"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    try:
        payload = decode_token(credentials.credentials)
    except AuthenticationError as e:
        logger.log_auth_event("token", False, reason=e.message)
        raise

    result = await db.execute(select(User).where(User.id == payload["sub"]))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    set_user_id(str(user.id))
    return user


async def get_current_staff(
    current_user: User = Depends(get_current_user)
) -> User:
    """Admin or student assistant"""
    permissions.ensure_staff(current_user)
    return current_user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    permissions.ensure_admin(current_user)
    return current_user
