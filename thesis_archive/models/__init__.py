# Re-export all models for convenient imports
from thesis_archive.models.user import User, UserRole, STAFF_ROLES
from thesis_archive.models.thesis import Thesis, ThesisStatus, Department
from thesis_archive.models.program import Program
from thesis_archive.models.system_setting import SystemSettings, SETTINGS_ROW_ID

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "STAFF_ROLES",
    # Archive
    "Thesis",
    "ThesisStatus",
    "Department",
    "Program",
    # Branding
    "SystemSettings",
    "SETTINGS_ROW_ID",
]
