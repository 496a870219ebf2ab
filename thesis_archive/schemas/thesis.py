from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from thesis_archive.models.thesis import Department, ThesisStatus
from thesis_archive.schemas.common import CamelModel

MIN_YEAR = 1900


def max_year() -> int:
    return datetime.utcnow().year + 1


def parse_year(value: Any) -> Optional[int]:
    """
    Normalize a year coming from a form field or query string.

    Empty values mean "no year". Anything else must be an integer between
    1900 and next year.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Year must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if not value.lstrip("-").isdigit():
            raise ValueError("Year must be a number")
        value = int(value)
    if not isinstance(value, int):
        raise ValueError("Year must be a number")
    if value < MIN_YEAR or value > max_year():
        raise ValueError(f"Year must be between {MIN_YEAR} and {max_year()}")
    return value


class Person(CamelModel):
    """An author or advisor entry"""
    id: str = ""
    name: str = Field(..., min_length=1, max_length=255)

    @model_validator(mode="before")
    @classmethod
    def accept_plain_name(cls, v):
        if isinstance(v, str):
            return {"name": v}
        return v

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return "" if v is None else str(v)


class ThesisBase(CamelModel):
    abstract: Optional[str] = None
    authors: List[Person] = Field(default_factory=list)
    advisors: List[Person] = Field(default_factory=list)
    program: Optional[str] = Field(None, max_length=200)
    year: Optional[int] = None
    shelf_location: Optional[str] = Field(None, max_length=255)

    @field_validator("year", mode="before")
    @classmethod
    def validate_year(cls, v):
        return parse_year(v)

    @field_validator("abstract", "program", "shelf_location", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ThesisCreate(ThesisBase):
    """Fields accepted by admin create and student submit"""
    title: str = Field(..., max_length=500)
    department: Department

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and department are required")
        return v


class ThesisUpdate(ThesisBase):
    """Partial update; only fields that were sent are applied"""
    title: Optional[str] = Field(None, max_length=500)
    department: Optional[Department] = None
    authors: Optional[List[Person]] = None
    advisors: Optional[List[Person]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip() if v else v


class ThesisResponse(CamelModel):
    id: str
    title: str
    abstract: Optional[str] = None
    authors: List[Person] = Field(default_factory=list)
    advisors: List[Person] = Field(default_factory=list)
    department: Department
    program: Optional[str] = None
    year: Optional[int] = None
    pdf_url: Optional[str] = None
    shelf_location: Optional[str] = None
    status: ThesisStatus
    submitted_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ThesisPage(CamelModel):
    data: List[ThesisResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ThesisFilters(CamelModel):
    """Listing filters after normalization; None means unconstrained"""
    department: Optional[Department] = None
    program: Optional[str] = None
    year: Optional[int] = None
    search: Optional[str] = None
    status: Optional[ThesisStatus] = None

    @field_validator("department", "program", "status", mode="before")
    @classmethod
    def empty_is_absent(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("search", mode="before")
    @classmethod
    def blank_search_is_absent(cls, v):
        # The term itself is matched as typed, surrounding spaces included
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("year", mode="before")
    @classmethod
    def validate_year(cls, v):
        return parse_year(v)


class ThesisActionResponse(CamelModel):
    message: str
    thesis: ThesisResponse
