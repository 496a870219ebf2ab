from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from thesis_archive.core.database import Base
from thesis_archive.core.types import GUID, generate_uuid, enum_values


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "admin"
    STUDENT_ASSISTANT = "student-assistant"
    STUDENT = "student"


# Roles allowed into the back office (approvals, thesis management)
STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.STUDENT_ASSISTANT})


class User(Base):
    """Account for an administrator, a student assistant or a student"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    username = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    role = Column(
        SQLEnum(UserRole, name="user_role", values_callable=enum_values),
        default=UserRole.STUDENT,
        nullable=False,
        index=True,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Deleting a user keeps their theses and clears submitted_by
    submissions = relationship("Thesis", back_populates="submitter")

    def __repr__(self):
        return f"<User {self.username} ({self.role.value if self.role else '-'})>"
