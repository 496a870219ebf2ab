"""Auth Service - credential checks and self-service account changes"""
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateResourceError,
    InvalidCredentialsError,
)
from thesis_archive.core.logging_config import logger
from thesis_archive.core.security import create_access_token, get_password_hash, verify_password
from thesis_archive.models.user import User, UserRole, STAFF_ROLES
from thesis_archive.services import user_service

# loginType -> roles admitted through that login form
LOGIN_TYPE_ROLES = {
    "student": frozenset({UserRole.STUDENT}),
    "admin": STAFF_ROLES,
}


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role.value})


async def authenticate(
    db: AsyncSession,
    username: str,
    password: str,
    login_type: Optional[str] = None,
) -> User:
    """
    Check credentials and that the account may use the requested login form.

    Unknown users and wrong passwords produce the same error.
    """
    user = await user_service.get_by_username(db, username.strip())
    if user is None or not verify_password(password, user.hashed_password):
        logger.log_auth_event("login", False, username=username, reason="invalid credentials")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.log_auth_event("login", False, username=username, reason="inactive account")
        raise AuthenticationError("Account is disabled")

    allowed = LOGIN_TYPE_ROLES.get(login_type) if login_type else None
    if allowed is not None and user.role not in allowed:
        logger.log_auth_event("login", False, username=username, reason=f"role not allowed for {login_type} login")
        raise AuthorizationError(
            "Please use the student login" if user.role == UserRole.STUDENT
            else "Please use the admin login"
        )

    user.last_login = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    logger.log_auth_event("login", True, username=user.username, role=user.role.value)
    return user


async def change_username(db: AsyncSession, user: User, new_username: str) -> User:
    new_username = new_username.strip()
    if new_username.lower() != user.username.lower():
        if await user_service.username_taken(db, new_username, exclude_id=user.id):
            raise DuplicateResourceError("Username already exists", field="username")
    user.username = new_username
    await db.commit()
    await db.refresh(user)
    logger.log_auth_event("username_change", True, username=user.username)
    return user


async def change_password(db: AsyncSession, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        logger.log_auth_event("password_change", False, username=user.username, reason="wrong current password")
        raise AuthenticationError("Current password is incorrect")
    user.hashed_password = get_password_hash(new_password)
    await db.commit()
    logger.log_auth_event("password_change", True, username=user.username)
