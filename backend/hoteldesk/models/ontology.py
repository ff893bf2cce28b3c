"""
Domain objects persisted by the front desk
Rooms, guests, reservations, owners, promo codes, invoices, transactions and
the singleton settings row
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text, JSON,
    Enum as SQLEnum, Boolean, Numeric, UniqueConstraint
)
from sqlalchemy.orm import relationship
from hoteldesk.database import Base


# ============== Enums ==============

class EmployeeRole(str, Enum):
    """Console user role"""
    ADMIN = "admin"
    RECEPTIONIST = "receptionist"


class RoomStatus(str, Enum):
    """Room status"""
    AVAILABLE = "available"
    RESERVED = "reserved"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class Cleanliness(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


class GuestStatus(str, Enum):
    """Stay status"""
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"


class ReservationStatus(str, Enum):
    """Reservation status"""
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CHECKED_IN = "checked-in"


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class PromoStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransactionType(str, Enum):
    """Money movement kind"""
    ADVANCE = "advance"
    PAYMENT = "payment"
    REFUND = "refund"
    SECURITY_DEPOSIT = "security_deposit"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    ONLINE = "Online"
    PAY_AT_HOTEL = "PayAtHotel"


class Season(str, Enum):
    """Owner usage season"""
    SUMMER = "summer"
    WINTER = "winter"
    NONE = "none"


class DayType(str, Enum):
    WEEKEND = "weekend"
    WEEKDAY = "weekday"


class AlertType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# Statuses that still hold a room
LIVE_RESERVATION_STATUSES = (ReservationStatus.RESERVED, ReservationStatus.CONFIRMED)


# ============== Objects ==============

class Employee(Base):
    """Console user (admin or receptionist)"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), unique=True, nullable=False, index=True)
    password_hash = Column(String(200), nullable=False)
    role = Column(SQLEnum(EmployeeRole), default=EmployeeRole.RECEPTIONIST, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Room(Base):
    """Room inventory entry"""
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)
    bed_type = Column(String(30), nullable=False)
    category = Column(String(30), nullable=False)
    view = Column(String(50), default="")
    rate = Column(Numeric(10, 2), nullable=False)                 # nightly rate
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    owner = Column(String(100), default="hotel")
    images = Column(JSON, default=list)                           # image URLs
    amenities = Column(JSON, default=list)
    is_publicly_visible = Column(Boolean, default=False)
    public_description = Column(Text)
    adults = Column(Integer, default=2)
    infants = Column(Integer, default=0)
    cleanliness = Column(SQLEnum(Cleanliness), default=Cleanliness.CLEAN)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # history keeps its room_id when a room is deleted
    guests = relationship("Guest", back_populates="room", passive_deletes=True)
    reservations = relationship("Reservation", back_populates="room", passive_deletes=True)


class Reservation(Base):
    """Future-dated booking of a room"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    guest_name = Column(String(100), nullable=False)
    address = Column(String(255), default="")
    email = Column(String(120))
    phone_no = Column(String(20), nullable=False)
    cnic = Column(String(20), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(SQLEnum(ReservationStatus), default=ReservationStatus.RESERVED, nullable=False)
    created_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    room = relationship("Room", back_populates="reservations")
    creator = relationship("Employee")
    transactions = relationship("Transaction", back_populates="reservation")

    @property
    def room_number(self) -> str:
        return self.room.room_number if self.room else ""

    @property
    def advance_paid(self) -> Decimal:
        """Money collected against the reservation, net of refunds"""
        total = Decimal("0")
        for tx in self.transactions:
            if tx.type == TransactionType.REFUND:
                total -= tx.amount
            else:
                total += tx.amount
        return total


class Guest(Base):
    """A stay: created at check-in, closed at checkout"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    address = Column(String(255), default="")
    phone = Column(String(20), nullable=False)
    cnic = Column(String(20), nullable=False)
    email = Column(String(120))
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=True)
    check_in_at = Column(DateTime, default=datetime.now, nullable=False)
    check_out_at = Column(DateTime, nullable=False)                 # expected, then actual
    stay_duration = Column(Integer, default=1)                      # nights
    apply_discount = Column(Boolean, default=False)
    promo_code = Column(String(30))
    additional_discount = Column(Numeric(10, 2), default=0)
    status = Column(SQLEnum(GuestStatus), default=GuestStatus.CHECKED_IN, nullable=False)
    total_rent = Column(Numeric(10, 2), default=0)
    created_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    room = relationship("Room", back_populates="guests")
    reservation = relationship("Reservation")
    creator = relationship("Employee")
    invoice = relationship("Invoice", back_populates="guest", uselist=False)
    transactions = relationship("Transaction", back_populates="guest")


class Invoice(Base):
    """Invoice issued at check-in, re-totalled on every money movement"""
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(30), unique=True, nullable=False)
    guest_id = Column(Integer, ForeignKey("guests.id", ondelete="SET NULL"), nullable=True)
    guest_details = Column(JSON, default=dict)      # snapshot: fullName, phone, cnic, email
    room_details = Column(JSON, default=dict)       # snapshot: roomNumber, category
    subtotal = Column(Numeric(10, 2), default=0)
    discount_amount = Column(Numeric(10, 2), default=0)
    promo_percentage = Column(Integer, default=0)
    promo_discount = Column(Numeric(10, 2), default=0)
    additional_discount = Column(Numeric(10, 2), default=0)
    tax_rate = Column(Numeric(5, 2), default=0)
    tax_amount = Column(Numeric(10, 2), default=0)
    grand_total = Column(Numeric(10, 2), default=0)
    advance_adjusted = Column(Numeric(10, 2), default=0)
    total_paid = Column(Numeric(10, 2), default=0)
    total_refunded = Column(Numeric(10, 2), default=0)
    balance_due = Column(Numeric(10, 2), default=0)
    status = Column(SQLEnum(InvoiceStatus), default=InvoiceStatus.PENDING, nullable=False)
    issue_date = Column(DateTime, default=datetime.now)
    due_date = Column(DateTime)
    check_in_at = Column(DateTime)
    pdf_path = Column(String(255))
    created_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    guest = relationship("Guest", back_populates="invoice")
    creator = relationship("Employee")
    items = relationship("InvoiceItem", back_populates="invoice",
                         cascade="all, delete-orphan", order_by="InvoiceItem.id")


class InvoiceItem(Base):
    """Invoice line"""
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    description = Column(String(200), nullable=False)
    quantity = Column(Integer, default=1)
    unit_price = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), default=0)

    invoice = relationship("Invoice", back_populates="items")


class Owner(Base):
    """Apartment owner with a seasonal stay allowance"""
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    card_id = Column(String(50), unique=True, nullable=False, index=True)   # stored lower-case
    cnic = Column(String(20))
    phone = Column(String(20))
    email = Column(String(120))
    apartment_number = Column(String(20), nullable=False)
    assigned_room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True)
    agreement_start_date = Column(Date)
    agreement_end_date = Column(Date)
    summer_weekend = Column(Integer, default=0)
    summer_weekday = Column(Integer, default=0)
    winter_weekend = Column(Integer, default=0)
    winter_weekday = Column(Integer, default=0)
    total_season_limit = Column(Integer, default=22)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    assigned_room = relationship("Room")
    attendance = relationship("OwnerAttendance", back_populates="owner",
                              cascade="all, delete-orphan")

    @property
    def season_limits(self) -> dict:
        return {
            "summer_weekend": self.summer_weekend or 0,
            "summer_weekday": self.summer_weekday or 0,
            "winter_weekend": self.winter_weekend or 0,
            "winter_weekday": self.winter_weekday or 0,
            "total_season_limit": self.total_season_limit or 0,
        }


class OwnerAttendance(Base):
    """One card scan per owner per day"""
    __tablename__ = "owner_attendance"
    __table_args__ = (UniqueConstraint("owner_id", "date", name="uq_owner_attendance_day"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    date = Column(Date, nullable=False)
    season = Column(SQLEnum(Season), nullable=False)
    day_type = Column(SQLEnum(DayType), nullable=False)
    amount_charged = Column(Numeric(10, 2), default=0)
    is_over_stay = Column(Boolean, default=False)
    marked_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)

    owner = relationship("Owner", back_populates="attendance")
    marker = relationship("Employee")


class PromoCode(Base):
    """Percentage discount code"""
    __tablename__ = "promo_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(30), unique=True, nullable=False, index=True)
    percentage = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(SQLEnum(PromoStatus), default=PromoStatus.ACTIVE, nullable=False)
    usage_count = Column(Integer, default=0)
    created_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    creator = relationship("Employee")


class Transaction(Base):
    """Payment, advance, refund or deposit against a reservation or a stay"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    description = Column(Text)
    recorded_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)

    reservation = relationship("Reservation", back_populates="transactions")
    guest = relationship("Guest", back_populates="transactions")
    recorder = relationship("Employee")


class Setting(Base):
    """Singleton: tax rate, currency, hotel name and system alert banner"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    tax_rate = Column(Numeric(5, 2), default=0)
    currency_symbol = Column(String(10), default="Rs")
    hotel_name = Column(String(100), default="HotelDesk")
    alert_message = Column(Text, default="")
    alert_is_active = Column(Boolean, default=False)
    alert_type = Column(SQLEnum(AlertType), default=AlertType.INFO)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    @property
    def system_alert(self) -> dict:
        return {
            "message": self.alert_message or "",
            "is_active": bool(self.alert_is_active),
            "type": self.alert_type or AlertType.INFO,
        }
