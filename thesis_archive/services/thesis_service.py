"""
Thesis Service - listing, lookup and mutation of archived theses

All listing queries share one shape: a conjunction built only from the
filters that were supplied, a COUNT under that predicate, and a page ordered
by year (newest first, undated last) then title.
"""
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy import select, and_, or_, Text, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.exceptions import ThesisNotFoundError, ValidationError
from thesis_archive.core.logging_config import logger
from thesis_archive.models.thesis import Thesis, ThesisStatus, Department
from thesis_archive.models.user import User
from thesis_archive.schemas.thesis import ThesisCreate, ThesisFilters, ThesisUpdate
from thesis_archive.services import permissions, workflow
from thesis_archive.services.storage_service import storage_service
from thesis_archive.utils.pagination import paginate

DEFAULT_SHELF_LOCATION = "N/A"

LISTING_ORDER = (Thesis.year.desc().nulls_last(), Thesis.title.asc())


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_filter_conditions(filters: ThesisFilters) -> List[Any]:
    """One condition per supplied filter; an empty list means no constraint"""
    conditions = []

    if filters.department is not None:
        conditions.append(Thesis.department == filters.department)
    if filters.program is not None:
        conditions.append(Thesis.program == filters.program)
    if filters.year is not None:
        conditions.append(Thesis.year == filters.year)
    if filters.status is not None:
        conditions.append(Thesis.status == filters.status)
    if filters.search is not None:
        pattern = _like_pattern(filters.search)
        conditions.append(
            or_(
                Thesis.title.ilike(pattern, escape="\\"),
                # Match inside the serialized author list, not the decoded value
                type_coerce(Thesis.authors, Text).ilike(pattern, escape="\\"),
                Thesis.abstract.ilike(pattern, escape="\\"),
            )
        )

    return conditions


def build_listing_query(filters: ThesisFilters):
    query = select(Thesis)
    conditions = build_filter_conditions(filters)
    if conditions:
        query = query.where(and_(*conditions))
    return query.order_by(*LISTING_ORDER)


async def list_theses(
    db: AsyncSession,
    filters: ThesisFilters,
    page: int,
    limit: int,
) -> Dict[str, Any]:
    """Filtered, paginated listing; ``data`` holds Thesis rows"""
    return await paginate(db, build_listing_query(filters), page, limit)


async def get_thesis(db: AsyncSession, thesis_id: str) -> Thesis:
    result = await db.execute(select(Thesis).where(Thesis.id == thesis_id))
    thesis = result.scalar_one_or_none()
    if not thesis:
        raise ThesisNotFoundError(thesis_id)
    return thesis


async def unique_years(db: AsyncSession, department: Optional[Department] = None) -> List[int]:
    """Distinct non-null years, newest first, optionally for one department"""
    query = select(Thesis.year).where(Thesis.year.isnot(None)).distinct()
    if department is not None:
        query = query.where(Thesis.department == department)
    result = await db.execute(query.order_by(Thesis.year.desc()))
    return [year for year in result.scalars().all()]


async def _insert(
    db: AsyncSession,
    data: ThesisCreate,
    status: ThesisStatus,
    submitted_by: Optional[str],
    pdf: Optional[UploadFile],
    default_shelf_location: Optional[str] = None,
) -> Thesis:
    pdf_url = await storage_service.save_pdf(pdf) if pdf is not None else None

    thesis = Thesis(
        title=data.title,
        abstract=data.abstract,
        authors=[person.model_dump() for person in data.authors],
        advisors=[person.model_dump() for person in data.advisors],
        department=data.department,
        program=data.program,
        year=data.year,
        pdf_url=pdf_url,
        shelf_location=data.shelf_location or default_shelf_location,
        status=status,
        submitted_by=submitted_by,
    )
    db.add(thesis)
    await db.commit()
    await db.refresh(thesis)
    return thesis


async def create_thesis(
    db: AsyncSession,
    data: ThesisCreate,
    actor: User,
    pdf: Optional[UploadFile] = None,
) -> Thesis:
    """Staff entry straight into the archive (no review step)"""
    permissions.ensure_staff(actor)
    thesis = await _insert(db, data, workflow.STAFF_CREATE_STATUS, None, pdf)
    logger.log_thesis_event("created", thesis.id, actor_id=actor.id)
    return thesis


async def submit_thesis(
    db: AsyncSession,
    data: ThesisCreate,
    actor: User,
    pdf: Optional[UploadFile] = None,
) -> Thesis:
    """Submission that waits in the review queue, owned by ``actor``"""
    thesis = await _insert(
        db,
        data,
        workflow.SUBMISSION_STATUS,
        actor.id,
        pdf,
        default_shelf_location=DEFAULT_SHELF_LOCATION,
    )
    logger.log_thesis_event("submitted", thesis.id, actor_id=actor.id)
    return thesis


async def update_thesis(
    db: AsyncSession,
    thesis_id: str,
    data: ThesisUpdate,
    actor: User,
    pdf: Optional[UploadFile] = None,
) -> Thesis:
    """Apply only the fields that were sent; a new PDF replaces the stored one"""
    thesis = await get_thesis(db, thesis_id)
    permissions.ensure_can_modify(thesis, actor)

    changes = data.model_dump(exclude_unset=True)
    if not changes and pdf is None:
        raise ValidationError("No fields to update")

    for field, value in changes.items():
        setattr(thesis, field, value)

    old_pdf_url = None
    if pdf is not None:
        old_pdf_url = thesis.pdf_url
        thesis.pdf_url = await storage_service.save_pdf(pdf)

    await db.commit()
    await db.refresh(thesis)

    if old_pdf_url and old_pdf_url != thesis.pdf_url:
        await storage_service.delete_pdf(old_pdf_url)

    logger.log_thesis_event("updated", thesis.id, actor_id=actor.id, fields=sorted(changes))
    return thesis


async def delete_thesis(db: AsyncSession, thesis_id: str, actor: User) -> None:
    thesis = await get_thesis(db, thesis_id)
    permissions.ensure_can_modify(thesis, actor)

    pdf_url = thesis.pdf_url
    await db.delete(thesis)
    await db.commit()

    await storage_service.delete_pdf(pdf_url)
    logger.log_thesis_event("deleted", thesis_id, actor_id=actor.id)


async def change_status(
    db: AsyncSession,
    thesis_id: str,
    target: ThesisStatus,
    actor: User,
) -> Thesis:
    """Approve or reject a pending thesis (staff only)"""
    permissions.ensure_staff(actor)
    thesis = await get_thesis(db, thesis_id)
    workflow.transition(thesis, target)
    await db.commit()
    await db.refresh(thesis)
    logger.log_thesis_event(target.value, thesis.id, actor_id=actor.id)
    return thesis


async def approve_thesis(db: AsyncSession, thesis_id: str, actor: User) -> Thesis:
    return await change_status(db, thesis_id, ThesisStatus.APPROVED, actor)


async def reject_thesis(db: AsyncSession, thesis_id: str, actor: User) -> Thesis:
    return await change_status(db, thesis_id, ThesisStatus.REJECTED, actor)


async def my_submissions(db: AsyncSession, actor: User, page: int, limit: int) -> Dict[str, Any]:
    """The caller's own theses, most recent first"""
    query = (
        select(Thesis)
        .where(Thesis.submitted_by == actor.id)
        .order_by(Thesis.created_at.desc())
    )
    return await paginate(db, query, page, limit)
