from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from thesis_archive.models.thesis import Department
from thesis_archive.schemas.common import CamelModel


class ProgramCreate(CamelModel):
    name: str = Field(..., min_length=3, max_length=200)
    department: Department
    description: Optional[str] = Field(None, max_length=500)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProgramUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=3, max_length=200)
    department: Optional[Department] = None
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProgramResponse(CamelModel):
    id: str
    name: str
    department: Department
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
