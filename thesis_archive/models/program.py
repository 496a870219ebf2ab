from sqlalchemy import Column, String, Boolean, DateTime, Text, UniqueConstraint, Enum as SQLEnum
from datetime import datetime

from thesis_archive.core.database import Base
from thesis_archive.core.types import GUID, generate_uuid, enum_values
from thesis_archive.models.thesis import Department


class Program(Base):
    """A course of study offered by a department; theses reference it by name"""
    __tablename__ = "programs"
    __table_args__ = (
        UniqueConstraint("department", "name", name="uq_programs_department_name"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    department = Column(
        SQLEnum(Department, name="department", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Program {self.name} ({self.department.value if self.department else '-'})>"
