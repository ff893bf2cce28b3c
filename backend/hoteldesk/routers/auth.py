"""
Authentication routes
"""
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import LoginRequest, UserResponse
from hoteldesk.security.auth import (
    create_access_token, get_current_user, set_session_cookie, clear_session_cookie
)
from hoteldesk.services.employee_service import EmployeeService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Log in and set the session cookie"""
    service = EmployeeService(db)
    try:
        employee = service.authenticate(data.email, data.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if not employee:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    token = create_access_token(employee.id, employee.role)
    set_session_cookie(response, token)
    return {
        "success": True,
        "message": "Login successful",
        "user": UserResponse.model_validate(employee),
        "token": token,
    }


@router.get("/me")
def me(current_user: Employee = Depends(get_current_user)):
    """Current user"""
    return {"success": True, "user": UserResponse.model_validate(current_user)}


@router.post("/logout")
def logout(response: Response):
    """Clear the session cookie"""
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out"}
