"""Settings Service - the single row of institution branding"""
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.config import settings
from thesis_archive.core.logging_config import logger
from thesis_archive.models.system_setting import SystemSettings, SETTINGS_ROW_ID
from thesis_archive.schemas.settings import SettingsUpdate


async def get_settings(db: AsyncSession) -> SystemSettings:
    """Return the settings row, creating it from configured defaults on first use"""
    row = await db.get(SystemSettings, SETTINGS_ROW_ID)
    if row is None:
        row = SystemSettings(
            id=SETTINGS_ROW_ID,
            school_name=settings.DEFAULT_SCHOOL_NAME,
            school_logo="",
            about_content=settings.DEFAULT_ABOUT_CONTENT,
        )
        db.add(row)
        await db.commit()
        await db.refresh(row)
        logger.info("Created default system settings")
    return row


async def update_settings(db: AsyncSession, data: SettingsUpdate) -> SystemSettings:
    row = await get_settings(db)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field != "header_background":
            continue
        setattr(row, field, value)

    await db.commit()
    await db.refresh(row)
    logger.info("Updated system settings", extra={"event_type": "settings", "fields": sorted(changes)})
    return row
