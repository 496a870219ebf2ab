"""Institution branding shown on the public site"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.database import get_db
from thesis_archive.models.user import User
from thesis_archive.modules.auth.dependencies import get_current_admin
from thesis_archive.schemas.settings import SettingsResponse, SettingsUpdate
from thesis_archive.services import settings_service

router = APIRouter()


@router.get("", response_model=SettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    return SettingsResponse.model_validate(await settings_service.get_settings(db))


@router.put("", response_model=SettingsResponse)
async def update_settings(
    data: SettingsUpdate,
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return SettingsResponse.model_validate(await settings_service.update_settings(db, data))
