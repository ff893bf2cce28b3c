"""
Tax and system settings routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import SettingsResponse, SettingsUpdate
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.setting_service import SettingService

router = APIRouter(prefix="/api/tax", tags=["Settings"])


@router.get("/get-all-gst")
def get_settings(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    setting = SettingService(db).get_settings()
    return {"success": True, "data": SettingsResponse.model_validate(setting)}


@router.put("/update-setting")
def update_settings(
    data: SettingsUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    setting = SettingService(db).update_settings(data)
    return {"success": True, "message": "Settings updated", "data": SettingsResponse.model_validate(setting)}
