"""
Pytest configuration and shared fixtures
"""
import os
import tempfile

# the app's lifespan creates tables and seeds an admin on the configured
# database, so point it at a scratch file before anything is imported
_scratch = tempfile.mkdtemp(prefix="hoteldesk-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_scratch}/lifespan.db")
os.environ.setdefault("INVOICE_DIR", os.path.join(_scratch, "invoices"))

import pytest
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from hoteldesk.database import Base, get_db
from hoteldesk.models import ontology  # noqa: F401
from hoteldesk.models.ontology import (
    Employee, EmployeeRole, Room, RoomStatus, PromoCode, PromoStatus
)
from hoteldesk.models.schemas import GuestCreate, ReservationCreate, OwnerCreate
from hoteldesk.security.auth import get_password_hash, create_access_token
from hoteldesk.services.guest_service import GuestService
from hoteldesk.services.reservation_service import ReservationService
from hoteldesk.services.owner_service import OwnerService
from hoteldesk.main import app

from factories import ADMIN_EMAIL, RECEPTIONIST_EMAIL, PASSWORD, guest_payload, reservation_payload


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the in-memory session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def invoice_dir(tmp_path, monkeypatch):
    """Invoice documents go to a per-test directory"""
    from hoteldesk.config import settings
    monkeypatch.setattr(settings, "INVOICE_DIR", str(tmp_path / "invoices"))
    return tmp_path / "invoices"


# ============== Accounts ==============

@pytest.fixture
def admin_user(db_session):
    admin = Employee(
        name="Admin",
        email=ADMIN_EMAIL,
        password_hash=get_password_hash(PASSWORD),
        role=EmployeeRole.ADMIN,
        is_active=True
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def receptionist_user(db_session):
    receptionist = Employee(
        name="Front Desk",
        email=RECEPTIONIST_EMAIL,
        password_hash=get_password_hash(PASSWORD),
        role=EmployeeRole.RECEPTIONIST,
        is_active=True
    )
    db_session.add(receptionist)
    db_session.commit()
    db_session.refresh(receptionist)
    return receptionist


@pytest.fixture
def admin_token(admin_user):
    return create_access_token(admin_user.id, admin_user.role)


@pytest.fixture
def receptionist_token(receptionist_user):
    return create_access_token(receptionist_user.id, receptionist_user.role)


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def receptionist_headers(receptionist_token):
    return {"Authorization": f"Bearer {receptionist_token}"}


# ============== Rooms ==============

def _room(db_session, number, category="Deluxe", rate="5000.00", status=RoomStatus.AVAILABLE):
    room = Room(
        room_number=number,
        bed_type="King",
        category=category,
        view="Mountain",
        rate=Decimal(rate),
        status=status,
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_room(db_session):
    return _room(db_session, "101")


@pytest.fixture
def sample_room_102(db_session):
    return _room(db_session, "102", category="Standard", rate="3000.00")


@pytest.fixture
def presidential_room(db_session):
    return _room(db_session, "301", category="Presidential", rate="15000.00")


@pytest.fixture
def maintenance_room(db_session):
    return _room(db_session, "401", status=RoomStatus.MAINTENANCE)


# ============== Stays and bookings ==============

@pytest.fixture
def sample_guest(db_session, sample_room, admin_user):
    """Two-night stay in room 101 checked in at noon today"""
    return GuestService(db_session).check_in(GuestCreate(**guest_payload()), admin_user)


@pytest.fixture
def sample_reservation(db_session, sample_room, admin_user):
    """Room 101, three days from now, two nights"""
    return ReservationService(db_session).create_reservation(
        ReservationCreate(**reservation_payload()), admin_user
    )


@pytest.fixture
def sample_promo(db_session, admin_user):
    promo = PromoCode(
        code="SUMMER10",
        percentage=10,
        start_date=date.today() - timedelta(days=1),
        end_date=date.today() + timedelta(days=30),
        status=PromoStatus.ACTIVE,
        created_by=admin_user.id,
    )
    db_session.add(promo)
    db_session.commit()
    db_session.refresh(promo)
    return promo


@pytest.fixture
def sample_owner(db_session, sample_room_102):
    return OwnerService(db_session).create_owner(OwnerCreate(
        full_name="Bilal Qureshi",
        card_id="CARD-001",
        phone="03111234567",
        apartment_number="A-12",
        assigned_room_id=sample_room_102.id,
        season_limits={"total_season_limit": 3},
    ))
