"""Settings repository - flat key/value business settings"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Setting

AUTO_EXCEL_EXPORT = "auto_excel_export"
EXCEL_EXPORT_SCHEDULE = "excel_export_schedule"
MAX_PHOTO_SELECTIONS = "max_photo_selections"

DEFAULT_EXPORT_SCHEDULE = "0 2 * * *"  # daily at 02:00
DEFAULT_MAX_PHOTO_SELECTIONS = 20


class SettingsRepository:
    """Repository for the settings table"""

    @staticmethod
    def get_value(db: Session, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = db.query(Setting).filter(Setting.setting_key == key).first()
        if setting is None or setting.setting_value is None:
            return default
        return setting.setting_value

    @staticmethod
    def set_value(db: Session, key: str, value: str) -> Setting:
        setting = db.query(Setting).filter(Setting.setting_key == key).first()
        if setting is None:
            setting = Setting(setting_key=key, setting_value=value)
            db.add(setting)
        else:
            setting.setting_value = value
        db.commit()
        return setting

    @classmethod
    def get_int(cls, db: Session, key: str, default: int) -> int:
        raw = cls.get_value(db, key)
        try:
            return int(raw) if raw is not None else default
        except ValueError:
            return default
