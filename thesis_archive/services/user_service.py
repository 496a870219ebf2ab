"""
User Service - admin management of student and student-assistant accounts

Every operation is scoped to one role: asking for a student-assistant id
under the students collection is a 404, never a cross-role edit.
"""
from typing import List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.exceptions import DuplicateResourceError, UserNotFoundError, ValidationError
from thesis_archive.core.logging_config import logger
from thesis_archive.core.security import get_password_hash
from thesis_archive.models.user import User, UserRole
from thesis_archive.schemas.user import ManagedUserCreate, ManagedUserUpdate

MANAGED_ROLES = (UserRole.STUDENT_ASSISTANT, UserRole.STUDENT)

_ROLE_LABELS = {
    UserRole.STUDENT_ASSISTANT: "Student assistant",
    UserRole.STUDENT: "Student",
    UserRole.ADMIN: "Admin",
}


def _check_managed(role: UserRole) -> None:
    if role not in MANAGED_ROLES:
        raise ValidationError(f"Role '{role.value}' cannot be managed here", field="role")


async def username_taken(db: AsyncSession, username: str, exclude_id: str = None) -> bool:
    """Case-insensitive uniqueness check"""
    query = select(func.count()).select_from(User).where(func.lower(User.username) == username.lower())
    if exclude_id:
        query = query.where(User.id != exclude_id)
    return (await db.scalar(query) or 0) > 0


async def get_by_username(db: AsyncSession, username: str):
    result = await db.execute(select(User).where(func.lower(User.username) == username.lower()))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession, role: UserRole) -> List[User]:
    _check_managed(role)
    result = await db.execute(
        select(User).where(User.role == role).order_by(User.created_at.desc())
    )
    return list(result.scalars().all())


async def get_user(db: AsyncSession, role: UserRole, user_id: str) -> User:
    _check_managed(role)
    result = await db.execute(select(User).where(User.id == user_id, User.role == role))
    user = result.scalar_one_or_none()
    if not user:
        raise UserNotFoundError(user_id, _ROLE_LABELS[role])
    return user


async def create_user(db: AsyncSession, role: UserRole, data: ManagedUserCreate) -> User:
    _check_managed(role)
    if await username_taken(db, data.username):
        raise DuplicateResourceError("Username already exists", field="username")

    user = User(
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        hashed_password=get_password_hash(data.password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Created {role.value} account {user.username}", extra={"event_type": "user_admin", "target_id": user.id})
    return user


async def update_user(db: AsyncSession, role: UserRole, user_id: str, data: ManagedUserUpdate) -> User:
    user = await get_user(db, role, user_id)
    changes = data.model_dump(exclude_unset=True)

    username = changes.get("username")
    if username and username.lower() != user.username.lower():
        if await username_taken(db, username, exclude_id=user.id):
            raise DuplicateResourceError("Username already exists", field="username")

    password = changes.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)

    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info(f"Updated {role.value} account {user.username}", extra={"event_type": "user_admin", "target_id": user.id})
    return user


async def delete_user(db: AsyncSession, role: UserRole, user_id: str) -> None:
    user = await get_user(db, role, user_id)
    await db.delete(user)
    await db.commit()
    logger.info(f"Deleted {role.value} account {user_id}", extra={"event_type": "user_admin", "target_id": user_id})
