"""
Thesis endpoints.

Listing, lookup and the year list are public. Creation by staff, student
submission, updates and the approval workflow require a bearer token. Write
operations take multipart form data so a PDF can travel with the fields.
"""
import json
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from thesis_archive.core.database import get_db
from thesis_archive.core.exceptions import ValidationError
from thesis_archive.models.user import User
from thesis_archive.modules.auth.dependencies import get_current_user, get_current_staff
from thesis_archive.schemas.common import MessageResponse, first_error_message
from thesis_archive.schemas.thesis import (
    ThesisActionResponse,
    ThesisCreate,
    ThesisFilters,
    ThesisPage,
    ThesisResponse,
    ThesisUpdate,
)
from thesis_archive.services import thesis_service
from thesis_archive.utils.pagination import resolve_page_params

router = APIRouter()


def validate_model(model_cls: Type[BaseModel], data: Dict[str, Any]):
    """Build a schema from loose input, reporting problems as a 400"""
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e))


def decode_people(raw: Optional[str], field: str) -> Optional[List[Any]]:
    """Authors/advisors arrive as a JSON array inside a form field"""
    if raw is None:
        return None
    if not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        raise ValidationError(f"{field} must be a JSON array", field=field)
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a JSON array", field=field)
    return value


def uploaded_pdf(pdf: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers send an empty part when no file was chosen
    if pdf is None or not pdf.filename:
        return None
    return pdf


def collect_form_fields(**fields: Any) -> Dict[str, Any]:
    """Keep only the form fields the client actually sent"""
    data = {}
    for name, value in fields.items():
        if value is None:
            continue
        if name in ("authors", "advisors"):
            value = decode_people(value, name)
        data[name] = value
    return data


# form key -> schema field for the multipart thesis fields
FORM_FIELDS = {
    "title": "title",
    "abstract": "abstract",
    "authors": "authors",
    "advisors": "advisors",
    "department": "department",
    "program": "program",
    "year": "year",
    "shelfLocation": "shelf_location",
}


def sent_form_fields(form) -> Dict[str, Any]:
    """Text fields present in the submitted form, including empty ones"""
    return {
        field: form.get(key)
        for key, field in FORM_FIELDS.items()
        if key in form and isinstance(form.get(key), str)
    }


def to_page(result: Dict[str, Any]) -> ThesisPage:
    return ThesisPage.model_validate({
        **result,
        "data": [ThesisResponse.model_validate(row) for row in result["data"]],
    })


@router.get("", response_model=ThesisPage)
async def list_theses(
    department: Optional[str] = Query(None),
    program: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Filtered, paginated listing ordered by year (newest first) then title"""
    filters = validate_model(ThesisFilters, {
        "department": department,
        "program": program,
        "year": year,
        "search": search,
        "status": status_filter,
    })
    page_number, page_size = resolve_page_params(page, limit)
    result = await thesis_service.list_theses(db, filters, page_number, page_size)
    return to_page(result)


@router.get("/years/unique", response_model=List[int])
async def list_unique_years(
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    filters = validate_model(ThesisFilters, {"department": department})
    return await thesis_service.unique_years(db, filters.department)


@router.get("/my-submissions", response_model=ThesisPage)
async def list_my_submissions(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    page_number, page_size = resolve_page_params(page, limit)
    result = await thesis_service.my_submissions(db, current_user, page_number, page_size)
    return to_page(result)


@router.post("/submit", response_model=ThesisResponse, status_code=status.HTTP_201_CREATED)
async def submit_thesis(
    title: Optional[str] = Form(None),
    abstract: Optional[str] = Form(None),
    authors: Optional[str] = Form(None),
    advisors: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    program: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    shelf_location: Optional[str] = Form(None, alias="shelfLocation"),
    pdf: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Student submission; lands in the review queue as pending"""
    data = _create_payload(
        title=title, abstract=abstract, authors=authors, advisors=advisors,
        department=department, program=program, year=year, shelf_location=shelf_location,
    )
    thesis = await thesis_service.submit_thesis(db, data, current_user, uploaded_pdf(pdf))
    return ThesisResponse.model_validate(thesis)


@router.post("", response_model=ThesisResponse, status_code=status.HTTP_201_CREATED)
async def create_thesis(
    title: Optional[str] = Form(None),
    abstract: Optional[str] = Form(None),
    authors: Optional[str] = Form(None),
    advisors: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    program: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    shelf_location: Optional[str] = Form(None, alias="shelfLocation"),
    pdf: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Staff entry; published immediately as approved"""
    data = _create_payload(
        title=title, abstract=abstract, authors=authors, advisors=advisors,
        department=department, program=program, year=year, shelf_location=shelf_location,
    )
    thesis = await thesis_service.create_thesis(db, data, current_user, uploaded_pdf(pdf))
    return ThesisResponse.model_validate(thesis)


def _create_payload(**fields: Any) -> ThesisCreate:
    if not (fields.get("title") or "").strip() or not (fields.get("department") or "").strip():
        raise ValidationError("Title and department are required")
    return validate_model(ThesisCreate, collect_form_fields(**fields))


@router.get("/{thesis_id}", response_model=ThesisResponse)
async def get_thesis(thesis_id: str, db: AsyncSession = Depends(get_db)):
    thesis = await thesis_service.get_thesis(db, thesis_id)
    return ThesisResponse.model_validate(thesis)


@router.put("/{thesis_id}", response_model=ThesisResponse)
async def update_thesis(
    thesis_id: str,
    request: Request,
    pdf: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Partial update by staff, or by the owning student while still pending.

    Accepts the same form fields as create. A field sent empty clears the
    stored value; a field not sent at all is left alone.
    """
    form = await request.form()
    data = validate_model(ThesisUpdate, collect_form_fields(**sent_form_fields(form)))
    thesis = await thesis_service.update_thesis(db, thesis_id, data, current_user, uploaded_pdf(pdf))
    return ThesisResponse.model_validate(thesis)


@router.put("/{thesis_id}/approve", response_model=ThesisActionResponse)
async def approve_thesis(
    thesis_id: str,
    current_user: User = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    thesis = await thesis_service.approve_thesis(db, thesis_id, current_user)
    return ThesisActionResponse(message="Thesis approved successfully", thesis=ThesisResponse.model_validate(thesis))


@router.put("/{thesis_id}/reject", response_model=ThesisActionResponse)
async def reject_thesis(
    thesis_id: str,
    current_user: User = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    thesis = await thesis_service.reject_thesis(db, thesis_id, current_user)
    return ThesisActionResponse(message="Thesis rejected successfully", thesis=ThesisResponse.model_validate(thesis))


@router.delete("/{thesis_id}", response_model=MessageResponse)
async def delete_thesis(
    thesis_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await thesis_service.delete_thesis(db, thesis_id, current_user)
    return MessageResponse(message="Thesis deleted successfully")
