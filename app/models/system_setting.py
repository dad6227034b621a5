"""
SystemSetting model - single row of site-wide switches
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, TIMESTAMP, func
from app.database import Base


class SystemSetting(Base):
    """
    System settings table - maintenance mode and quiz defaults
    """
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)
    site_name = Column(String(255), nullable=False, default="Quiz Assessment Platform")
    site_description = Column(Text)
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    show_leaderboard = Column(Boolean, nullable=False, default=True)
    default_quiz_time_limit = Column(Integer)  # minutes
    max_quiz_attempts = Column(Integer)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<SystemSetting(maintenance_mode={self.maintenance_mode})>"
