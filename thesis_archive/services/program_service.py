"""Program Service - academic programs offered per department"""
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.exceptions import DuplicateResourceError, ProgramNotFoundError
from thesis_archive.core.logging_config import logger
from thesis_archive.models.program import Program
from thesis_archive.models.thesis import Department
from thesis_archive.schemas.program import ProgramCreate, ProgramUpdate


async def _name_taken(
    db: AsyncSession,
    department: Department,
    name: str,
    exclude_id: Optional[str] = None,
) -> bool:
    query = select(func.count()).select_from(Program).where(
        Program.department == department,
        func.lower(Program.name) == name.lower(),
    )
    if exclude_id:
        query = query.where(Program.id != exclude_id)
    return (await db.scalar(query) or 0) > 0


async def list_programs(
    db: AsyncSession,
    department: Optional[Department] = None,
    active_only: bool = False,
) -> List[Program]:
    query = select(Program)
    if department is not None:
        query = query.where(Program.department == department)
    if active_only:
        query = query.where(Program.is_active.is_(True))
    result = await db.execute(query.order_by(Program.department, Program.name))
    return list(result.scalars().all())


async def get_program(db: AsyncSession, program_id: str) -> Program:
    result = await db.execute(select(Program).where(Program.id == program_id))
    program = result.scalar_one_or_none()
    if not program:
        raise ProgramNotFoundError(program_id)
    return program


async def create_program(db: AsyncSession, data: ProgramCreate) -> Program:
    if await _name_taken(db, data.department, data.name):
        raise DuplicateResourceError("A program with this name already exists in the department", field="name")

    program = Program(**data.model_dump())
    db.add(program)
    await db.commit()
    await db.refresh(program)
    logger.info(f"Created program {program.name}", extra={"event_type": "program", "program_id": program.id})
    return program


async def update_program(db: AsyncSession, program_id: str, data: ProgramUpdate) -> Program:
    program = await get_program(db, program_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "description"}

    department = changes.get("department", program.department)
    name = changes.get("name", program.name)
    if ("name" in changes or "department" in changes) and await _name_taken(db, department, name, exclude_id=program.id):
        raise DuplicateResourceError("A program with this name already exists in the department", field="name")

    for field, value in changes.items():
        setattr(program, field, value)

    await db.commit()
    await db.refresh(program)
    return program


async def delete_program(db: AsyncSession, program_id: str) -> None:
    program = await get_program(db, program_id)
    await db.delete(program)
    await db.commit()
    logger.info(f"Deleted program {program_id}", extra={"event_type": "program", "program_id": program_id})
