from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from thesis_archive.schemas.common import CamelModel


def _url_or_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value and not value.startswith(("http://", "https://", "/")):
        raise ValueError("Must be a valid URL or empty")
    return value


class SettingsResponse(CamelModel):
    school_name: str
    school_logo: str = ""
    header_background: Optional[str] = None
    about_content: str
    updated_at: Optional[datetime] = None


class SettingsUpdate(CamelModel):
    school_name: Optional[str] = Field(None, min_length=3, max_length=200)
    school_logo: Optional[str] = Field(None, max_length=1000)
    header_background: Optional[str] = Field(None, max_length=1000)
    about_content: Optional[str] = Field(None, min_length=10, max_length=5000)

    @field_validator("school_logo", "header_background")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _url_or_empty(v)
