"""
Settings service
The settings table holds a single row, created on first read
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session

from hoteldesk.config import settings as app_settings
from hoteldesk.models.ontology import Setting
from hoteldesk.models.schemas import SettingsUpdate

logger = logging.getLogger(__name__)


class SettingService:
    """Settings service"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> Setting:
        setting = self.db.query(Setting).order_by(Setting.id).first()
        if setting is None:
            setting = Setting(hotel_name=app_settings.APP_NAME)
            self.db.add(setting)
            self.db.commit()
            self.db.refresh(setting)
        return setting

    def get_tax_rate(self) -> Decimal:
        return Decimal(str(self.get_settings().tax_rate or 0))

    def update_settings(self, data: SettingsUpdate) -> Setting:
        """Partial update; the alert banner is replaced as a whole"""
        setting = self.get_settings()
        update_data = data.model_dump(exclude_unset=True)

        alert = update_data.pop("system_alert", None)
        for key, value in update_data.items():
            if value is not None:
                setattr(setting, key, value)

        if alert is not None:
            setting.alert_message = alert.get("message", "")
            setting.alert_is_active = alert.get("is_active", False)
            setting.alert_type = alert.get("type")

        self.db.commit()
        self.db.refresh(setting)
        logger.info("Settings updated: %s", ", ".join(sorted(data.model_fields_set)))
        return setting
