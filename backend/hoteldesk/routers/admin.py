"""
Account administration routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import ReceptionistCreate, PasswordUpdate, UserResponse
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.employee_service import EmployeeService
from hoteldesk.services.errors import ConflictError

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/receptionists")
def list_receptionists(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    service = EmployeeService(db)
    return {
        "success": True,
        "data": [UserResponse.model_validate(e) for e in service.get_receptionists()],
    }


@router.post("/receptionists", status_code=status.HTTP_201_CREATED)
def create_receptionist(
    data: ReceptionistCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    service = EmployeeService(db)
    try:
        employee = service.create_receptionist(data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {
        "success": True,
        "message": "Receptionist created",
        "data": UserResponse.model_validate(employee),
    }


@router.put("/update-password")
def update_password(
    data: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Change the caller's own password"""
    service = EmployeeService(db)
    try:
        service.update_password(current_user, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Password updated"}
