"""
System settings service - singleton settings row and maintenance flag
"""
import logging

from sqlalchemy.orm import Session

from app.models import SystemSetting
from app.schemas.settings import SettingsUpdate

logger = logging.getLogger(__name__)

SETTINGS_ID = 1


class SettingsService:
    """Reads and updates the single system settings row"""

    def get_settings(self, db: Session) -> SystemSetting:
        """Return the settings row, creating it with defaults on first use"""
        row = db.query(SystemSetting).filter(SystemSetting.id == SETTINGS_ID).first()
        if row is None:
            row = SystemSetting(id=SETTINGS_ID)
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.info("Created default system settings")
        return row

    def update_settings(self, db: Session, data: SettingsUpdate) -> SystemSetting:
        row = self.get_settings(db)
        changes = data.model_dump(exclude_unset=True)

        for field, value in changes.items():
            if value is None and field in ("site_name", "maintenance_mode", "show_leaderboard"):
                continue
            setattr(row, field, value)

        db.commit()
        db.refresh(row)

        if "maintenance_mode" in changes:
            logger.warning(f"Maintenance mode {'enabled' if row.maintenance_mode else 'disabled'}")
        return row

    def is_maintenance_mode(self, db: Session) -> bool:
        row = db.query(SystemSetting.maintenance_mode).filter(SystemSetting.id == SETTINGS_ID).first()
        return bool(row and row.maintenance_mode)


# Global instance
settings_service = SettingsService()
