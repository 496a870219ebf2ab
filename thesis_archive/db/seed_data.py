"""
Database Seed Data Module

Bootstrap rows every fresh installation needs: the first admin account,
the default program catalogue and the branding settings row. Each step is
idempotent, so seeding an existing database only fills in what is missing.

Run with: thesis-archive seed   (or: python -m thesis_archive.db.seed_data)
"""
import asyncio
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.config import settings
from thesis_archive.core.database import get_session_local, init_db
from thesis_archive.core.logging_config import logger
from thesis_archive.core.security import get_password_hash
from thesis_archive.models.program import Program
from thesis_archive.models.thesis import Department
from thesis_archive.models.user import User, UserRole
from thesis_archive.services import settings_service, user_service


DEFAULT_PROGRAMS = [
    {"name": "BS Computer Science", "department": Department.COLLEGE,
     "description": "Bachelor of Science in Computer Science"},
    {"name": "BS Business Administration", "department": Department.COLLEGE,
     "description": "Bachelor of Science in Business Administration"},
    {"name": "BA Education", "department": Department.COLLEGE,
     "description": "Bachelor of Arts in Education"},
    {"name": "STEM", "department": Department.SENIOR_HIGH,
     "description": "Science, Technology, Engineering, and Mathematics"},
    {"name": "ABM", "department": Department.SENIOR_HIGH,
     "description": "Accountancy, Business, and Management"},
    {"name": "HUMSS", "department": Department.SENIOR_HIGH,
     "description": "Humanities and Social Sciences"},
]


async def ensure_admin(
    db: AsyncSession,
    username: Optional[str] = None,
    password: Optional[str] = None,
    first_name: str = "System",
    last_name: str = "Administrator",
) -> Optional[User]:
    """Create an admin account unless the username is already taken; returns the new user or None"""
    username = username or settings.DEFAULT_ADMIN_USERNAME
    if await user_service.get_by_username(db, username) is not None:
        return None

    admin = User(
        username=username,
        first_name=first_name,
        last_name=last_name,
        hashed_password=get_password_hash(password or settings.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info(f"Created admin account {username}")
    return admin


async def seed_programs(db: AsyncSession) -> int:
    result = await db.execute(select(Program.department, Program.name))
    existing = {(department, name.lower()) for department, name in result.all()}

    created = 0
    for entry in DEFAULT_PROGRAMS:
        if (entry["department"], entry["name"].lower()) in existing:
            continue
        db.add(Program(**entry))
        created += 1

    if created:
        await db.commit()
    return created


async def seed_all() -> Dict[str, int]:
    """Create tables if needed and insert all bootstrap rows"""
    await init_db()
    async with get_session_local()() as db:
        try:
            admin = await ensure_admin(db)
            programs = await seed_programs(db)
            await settings_service.get_settings(db)
        except Exception:
            await db.rollback()
            raise

    summary = {"admins": 1 if admin else 0, "programs": programs}
    logger.info(f"Seeding finished: {summary}")
    return summary


if __name__ == "__main__":
    print(asyncio.run(seed_all()))
