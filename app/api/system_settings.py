"""
System settings API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.api.deps import CurrentUser, require_admin
from app.database import get_db
from app.schemas.settings import SettingsResponse, SettingsUpdate
from app.services.settings_service import settings_service

router = APIRouter(prefix="/api", tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(db: Session = Depends(get_db)):
    """Public site settings, including whether maintenance mode is on"""
    return settings_service.get_settings(db)


@router.patch("/admin/settings", response_model=SettingsResponse)
async def update_settings(
    data: SettingsUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    logger.info(f"Admin {admin.id} updating settings: {sorted(data.model_dump(exclude_unset=True))}")
    return settings_service.update_settings(db, data)
