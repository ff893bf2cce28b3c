"""
Employee service
Console users and authentication
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from hoteldesk.config import settings
from hoteldesk.models.ontology import Employee, EmployeeRole
from hoteldesk.models.schemas import ReceptionistCreate, PasswordUpdate
from hoteldesk.security.auth import get_password_hash, verify_password
from hoteldesk.services.errors import ConflictError

logger = logging.getLogger(__name__)


class EmployeeService:
    """Employee service"""

    def __init__(self, db: Session):
        self.db = db

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def get_employee_by_email(self, email: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.email == email.strip().lower()).first()

    def get_receptionists(self) -> List[Employee]:
        return self.db.query(Employee).filter(
            Employee.role == EmployeeRole.RECEPTIONIST
        ).order_by(Employee.created_at.desc()).all()

    def create_receptionist(self, data: ReceptionistCreate) -> Employee:
        """Create a receptionist account"""
        if self.get_employee_by_email(data.email):
            raise ConflictError(f"An account with email '{data.email}' already exists")

        employee = Employee(
            name=data.name.strip(),
            email=data.email.strip().lower(),
            password_hash=get_password_hash(data.password),
            role=EmployeeRole.RECEPTIONIST,
        )
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        logger.info("Receptionist %s created", employee.email)
        return employee

    def authenticate(self, email: str, password: str) -> Optional[Employee]:
        """
        Check credentials

        Returns the employee, or None when the email or password is wrong.
        Raises ValueError for a deactivated account.
        """
        employee = self.get_employee_by_email(email)
        if not employee or not verify_password(password, employee.password_hash):
            return None
        if not employee.is_active:
            raise ValueError("This account has been deactivated")
        return employee

    def update_password(self, employee: Employee, data: PasswordUpdate) -> None:
        if not verify_password(data.current_password, employee.password_hash):
            raise ValueError("Current password is incorrect")
        employee.password_hash = get_password_hash(data.new_password)
        self.db.commit()
        logger.info("Password updated for %s", employee.email)

    def ensure_default_admin(self) -> Optional[Employee]:
        """Seed an admin account when no employee exists yet"""
        if self.db.query(Employee).count() > 0:
            return None
        admin = Employee(
            name="Administrator",
            email=settings.DEFAULT_ADMIN_EMAIL.lower(),
            password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            role=EmployeeRole.ADMIN,
        )
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        logger.warning("Seeded default admin %s; change its password", admin.email)
        return admin
