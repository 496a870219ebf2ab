from sqlalchemy import Column, String, DateTime, Text, Integer
from datetime import datetime

from thesis_archive.core.database import Base


# The settings table only ever holds this row
SETTINGS_ROW_ID = 1


class SystemSettings(Base):
    """Institution branding shown on the public site"""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    school_name = Column(String(200), nullable=False)
    school_logo = Column(String(1000), nullable=False, default="")
    header_background = Column(String(1000), nullable=True)
    about_content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SystemSettings {self.school_name}>"
