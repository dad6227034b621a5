"""
Pydantic schemas for system settings
"""
from pydantic import BaseModel, Field
from typing import Optional


class SettingsResponse(BaseModel):
    site_name: str
    site_description: Optional[str] = None
    maintenance_mode: bool
    show_leaderboard: bool
    default_quiz_time_limit: Optional[int] = None
    max_quiz_attempts: Optional[int] = None

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    site_name: Optional[str] = Field(None, min_length=1)
    site_description: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    show_leaderboard: Optional[bool] = None
    default_quiz_time_limit: Optional[int] = Field(None, gt=0)
    max_quiz_attempts: Optional[int] = Field(None, gt=0)
