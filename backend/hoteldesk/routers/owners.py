"""
Owner routes
Card scan, attendance marking and owner management
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import (
    OwnerCreate, OwnerUpdate, OwnerResponse, MarkAttendanceRequest,
    AttendanceLogResponse, OwnerUsageResponse, TimelineEntry
)
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.owner_service import OwnerService

router = APIRouter(prefix="/api/owners", tags=["Owners"])


@router.get("/scan/{card_id}")
def scan_card(
    card_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Owner, current usage and the last five visits for a card"""
    result = OwnerService(db).scan(card_id)
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No owner found for this card")
    return {
        "success": True,
        "owner": OwnerResponse.model_validate(result["owner"]),
        "usage": OwnerUsageResponse.model_validate(result["usage"]),
        "recentLogs": [AttendanceLogResponse.model_validate(log) for log in result["recent_logs"]],
    }


@router.post("/mark-attendance", status_code=status.HTTP_201_CREATED)
def mark_attendance(
    data: MarkAttendanceRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        result = OwnerService(db).mark_attendance(data, current_user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No owner found for this card")

    log, usage = result
    message = "Attendance marked (over stay)" if log.is_over_stay else "Attendance marked"
    return {
        "success": True,
        "message": message,
        "isOverStay": log.is_over_stay,
        "log": AttendanceLogResponse.model_validate(log),
        "usage": OwnerUsageResponse.model_validate(usage),
    }


@router.get("/get-all-owners")
def get_all_owners(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    owners = OwnerService(db).get_owners()
    return {"success": True, "owners": [OwnerResponse.model_validate(o) for o in owners]}


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_owner(
    data: OwnerCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        owner = OwnerService(db).create_owner(data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Owner created", "data": OwnerResponse.model_validate(owner)}


@router.put("/update/{owner_id}")
def update_owner(
    owner_id: int,
    data: OwnerUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        owner = OwnerService(db).update_owner(owner_id, data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not owner:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Owner not found")
    return {"success": True, "message": "Owner updated", "data": OwnerResponse.model_validate(owner)}


@router.delete("/delete/{owner_id}")
def delete_owner(
    owner_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    if not OwnerService(db).delete_owner(owner_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Owner not found")
    return {"success": True, "message": "Owner deleted"}


@router.get("/timeline/{owner_id}")
def get_owner_timeline(
    owner_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    timeline = OwnerService(db).timeline(owner_id)
    if timeline is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Owner not found")
    return {"success": True, "timeline": [TimelineEntry.model_validate(e) for e in timeline]}
