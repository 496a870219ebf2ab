from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from thesis_archive.core.database import Base
from thesis_archive.core.types import GUID, JSONList, generate_uuid, enum_values


class Department(str, enum.Enum):
    COLLEGE = "college"
    SENIOR_HIGH = "senior-high"


class ThesisStatus(str, enum.Enum):
    """Submission workflow state (see services.workflow)"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Thesis(Base):
    """An archived thesis or research paper"""
    __tablename__ = "theses"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(500), nullable=False, index=True)
    abstract = Column(Text, nullable=True)

    # [{"id": "...", "name": "..."}] kept as JSON text on the row
    authors = Column(JSONList, nullable=False, default=list)
    advisors = Column(JSONList, nullable=False, default=list)

    department = Column(
        SQLEnum(Department, name="department", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    program = Column(String(200), nullable=True, index=True)
    year = Column(Integer, nullable=True, index=True)

    pdf_url = Column(String(1000), nullable=True)
    shelf_location = Column(String(255), nullable=True)

    status = Column(
        SQLEnum(ThesisStatus, name="thesis_status", values_callable=enum_values),
        default=ThesisStatus.PENDING,
        nullable=False,
        index=True,
    )
    submitted_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    submitter = relationship("User", back_populates="submissions")

    def __repr__(self):
        return f"<Thesis {self.title[:40]!r} ({self.status.value if self.status else '-'})>"
