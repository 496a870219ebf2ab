"""Academic programs: public reads, admin writes"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.database import get_db
from thesis_archive.models.thesis import Department
from thesis_archive.models.user import User
from thesis_archive.modules.auth.dependencies import get_current_admin
from thesis_archive.schemas.common import MessageResponse
from thesis_archive.schemas.program import ProgramCreate, ProgramResponse, ProgramUpdate
from thesis_archive.services import program_service

router = APIRouter()


@router.get("", response_model=List[ProgramResponse])
async def list_programs(
    department: Optional[Department] = Query(None),
    active_only: bool = Query(False, alias="activeOnly"),
    db: AsyncSession = Depends(get_db),
):
    programs = await program_service.list_programs(db, department, active_only)
    return [ProgramResponse.model_validate(p) for p in programs]


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(program_id: str, db: AsyncSession = Depends(get_db)):
    return ProgramResponse.model_validate(await program_service.get_program(db, program_id))


@router.post("", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
async def create_program(
    data: ProgramCreate,
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return ProgramResponse.model_validate(await program_service.create_program(db, data))


@router.put("/{program_id}", response_model=ProgramResponse)
async def update_program(
    program_id: str,
    data: ProgramUpdate,
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return ProgramResponse.model_validate(await program_service.update_program(db, program_id, data))


@router.delete("/{program_id}", response_model=MessageResponse)
async def delete_program(
    program_id: str,
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await program_service.delete_program(db, program_id)
    return MessageResponse(message="Program deleted successfully")
