"""
Authentication and authorization
The session is a JWT carried in an httpOnly cookie; a Bearer header is
accepted as a fallback for scripted clients
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import List, Optional
from fastapi import Depends, HTTPException, status, Request, Response
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from hoteldesk.config import settings
from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee, EmployeeRole

logger = logging.getLogger(__name__)

SESSION_EXPIRED = "Session expired, please log in again"


def get_password_hash(password: str) -> str:
    """Hash a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(employee_id: int, role: EmployeeRole,
                        expires_minutes: Optional[int] = None) -> str:
    """Create a session token"""
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    expire = datetime.now(UTC) + timedelta(minutes=minutes)
    to_encode = {
        "sub": str(employee_id),
        "role": role.value if isinstance(role, EmployeeRole) else str(role),
        "exp": expire
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode a session token; any failure is an expired session"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_EXPIRED)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)


def _read_token(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> Employee:
    """Resolve the logged-in employee"""
    token = _read_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_EXPIRED)

    payload = decode_token(token)
    try:
        employee_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_EXPIRED)

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee or not employee.is_active:
        logger.warning("Rejected session for employee %s", employee_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_EXPIRED)

    return employee


def require_role(allowed_roles: List[EmployeeRole]):
    """Role check dependency"""
    async def role_checker(current_user: Employee = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action"
            )
        return current_user
    return role_checker


require_admin = require_role([EmployeeRole.ADMIN])
require_staff = require_role([EmployeeRole.ADMIN, EmployeeRole.RECEPTIONIST])
