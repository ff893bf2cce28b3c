"""
Pydantic schemas
Request validation and response shaping; JSON keys are camelCase and object
ids are exposed as "_id"
"""
from datetime import datetime, date, time
from decimal import Decimal
from typing import Annotated, Optional, List, Union, Dict, Any
from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator, ConfigDict
from pydantic.alias_generators import to_camel

from hoteldesk.models.ontology import (
    EmployeeRole, RoomStatus, Cleanliness, GuestStatus, ReservationStatus,
    InvoiceStatus, PromoStatus, TransactionType, PaymentMethod, Season, DayType, AlertType
)
from hoteldesk.domain.rules.guest_rules import (
    normalize_phone, normalize_cnic, validate_date_range
)

# Default checkout time when only a date is given
CHECKOUT_TIME = time(12, 0)


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, accepts snake_case too, reads ORM attributes"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _to_checkout_datetime(value):
    """Accept a date, 'YYYY-MM-DD' or a full datetime"""
    if isinstance(value, str) and len(value) == 10:
        value = date.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, CHECKOUT_TIME)
    return value


def _to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stay times are stored as naive local time; convert offset-aware input"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _optional_phone(value: Optional[str]) -> Optional[str]:
    return normalize_phone(value) if value else None


def _optional_cnic(value: Optional[str]) -> Optional[str]:
    return normalize_cnic(value) if value else None


Phone = Annotated[str, AfterValidator(normalize_phone)]
Cnic = Annotated[str, AfterValidator(normalize_cnic)]
OptionalPhone = Annotated[Optional[str], AfterValidator(_optional_phone)]
OptionalCnic = Annotated[Optional[str], AfterValidator(_optional_cnic)]
LocalDatetime = Annotated[datetime, AfterValidator(_to_local_naive)]
OptionalLocalDatetime = Annotated[Optional[datetime], AfterValidator(_to_local_naive)]


# ============== Shared references ==============

class EmployeeRef(CamelModel):
    id: int = Field(serialization_alias="_id")
    name: str


class RoomRef(CamelModel):
    id: int = Field(serialization_alias="_id")
    room_number: str
    category: str
    bed_type: Optional[str] = None
    view: Optional[str] = None
    rate: float = 0


class GuestRef(CamelModel):
    id: int = Field(serialization_alias="_id")
    full_name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class ReservationRef(CamelModel):
    id: int = Field(serialization_alias="_id")
    guest_name: str
    start_date: date
    end_date: date


# ============== Auth ==============

class LoginRequest(CamelModel):
    email: str
    password: str


class UserResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    name: str
    email: str
    role: EmployeeRole
    is_active: bool = True


class ReceptionistCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=120)
    password: str = Field(..., min_length=6)


class PasswordUpdate(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


# ============== Rooms ==============

class RoomBase(CamelModel):
    room_number: str = Field(..., min_length=1, max_length=10)
    bed_type: str = Field(..., max_length=30)
    category: str = Field(..., max_length=30)
    view: str = ""
    rate: Decimal = Field(..., gt=0)
    status: RoomStatus = RoomStatus.AVAILABLE
    owner: str = "hotel"
    images: List[str] = []
    amenities: List[str] = []
    is_publicly_visible: bool = False
    public_description: Optional[str] = None
    adults: int = Field(default=2, ge=0)
    infants: int = Field(default=0, ge=0)
    cleanliness: Cleanliness = Cleanliness.CLEAN


class RoomCreate(RoomBase):
    pass


class RoomUpdate(CamelModel):
    room_number: Optional[str] = Field(None, min_length=1, max_length=10)
    bed_type: Optional[str] = None
    category: Optional[str] = None
    view: Optional[str] = None
    rate: Optional[Decimal] = Field(None, gt=0)
    status: Optional[RoomStatus] = None
    owner: Optional[str] = None
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    is_publicly_visible: Optional[bool] = None
    public_description: Optional[str] = None
    adults: Optional[int] = Field(None, ge=0)
    infants: Optional[int] = Field(None, ge=0)
    cleanliness: Optional[Cleanliness] = None


class RoomResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    room_number: str
    bed_type: str
    category: str
    view: Optional[str] = ""
    rate: float
    status: RoomStatus
    owner: Optional[str] = None
    images: List[str] = []
    amenities: List[str] = []
    is_publicly_visible: bool = False
    public_description: Optional[str] = None
    adults: Optional[int] = None
    infants: Optional[int] = None
    cleanliness: Optional[Cleanliness] = None
    dropdown_label: Optional[str] = None
    created_at: datetime

    @model_validator(mode="after")
    def _label(self):
        if not self.dropdown_label:
            self.dropdown_label = f"{self.room_number} - {self.category} ({self.bed_type})"
        return self


class RoomBooking(CamelModel):
    """One entry of a room's schedule"""
    type: str
    name: str
    start_date: datetime
    end_date: datetime
    status: str


# ============== Guests ==============

class GuestCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    address: str = ""
    phone: Phone
    cnic: Cnic
    email: Optional[str] = Field(None, max_length=120)
    room_number: str
    check_in_at: OptionalLocalDatetime = None
    check_out_at: LocalDatetime
    apply_discount: bool = False
    promo_code: Optional[str] = None
    additional_discount: Decimal = Field(default=0, ge=0)
    reservation_id: Optional[int] = None

    @field_validator("check_out_at", mode="before")
    @classmethod
    def _checkout(cls, value):
        return _to_checkout_datetime(value)

    @model_validator(mode="after")
    def _dates(self):
        start = self.check_in_at or datetime.now()
        validate_date_range(start, self.check_out_at)
        return self


class GuestUpdate(CamelModel):
    """Personal details only; stay data changes through checkout / extend"""
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = None
    phone: OptionalPhone = None
    cnic: OptionalCnic = None
    email: Optional[str] = Field(None, max_length=120)


class GuestExtend(CamelModel):
    new_checkout_date: LocalDatetime
    additional_discount: Decimal = Field(default=0, ge=0)

    @field_validator("new_checkout_date", mode="before")
    @classmethod
    def _checkout(cls, value):
        return _to_checkout_datetime(value)


class GuestResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    full_name: str
    address: Optional[str] = ""
    phone: str
    cnic: str
    email: Optional[str] = None
    room: Optional[RoomRef] = None
    reservation_id: Optional[int] = None
    check_in_at: datetime
    check_out_at: datetime
    stay_duration: int
    apply_discount: bool = False
    promo_code: Optional[str] = None
    additional_discount: float = 0
    status: GuestStatus
    total_rent: float = 0
    created_by: Optional[EmployeeRef] = Field(None, validation_alias="creator", serialization_alias="createdBy")
    created_at: datetime


# ============== Reservations ==============

class ReservationCreate(CamelModel):
    guest_name: str = Field(..., min_length=1, max_length=100)
    address: str = ""
    email: Optional[str] = Field(None, max_length=120)
    phone_no: Phone
    cnic: Cnic
    room_number: str
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _dates(self):
        validate_date_range(self.start_date, self.end_date, allow_past=False)
        return self


class ReservationSwap(CamelModel):
    room_number: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ReservationCheckIn(CamelModel):
    check_out_at: OptionalLocalDatetime = None
    apply_discount: bool = False
    promo_code: Optional[str] = None
    additional_discount: Decimal = Field(default=0, ge=0)

    @field_validator("check_out_at", mode="before")
    @classmethod
    def _checkout(cls, value):
        return _to_checkout_datetime(value) if value else value


class ReservationResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    guest_name: str
    address: Optional[str] = ""
    email: Optional[str] = None
    phone_no: str
    cnic: str
    room_number: str
    start_date: date
    end_date: date
    status: ReservationStatus
    advance_paid: float = 0
    created_at: datetime


# ============== Owners ==============

class SeasonLimitsSchema(CamelModel):
    summer_weekend: int = Field(default=0, ge=0)
    summer_weekday: int = Field(default=0, ge=0)
    winter_weekend: int = Field(default=0, ge=0)
    winter_weekday: int = Field(default=0, ge=0)
    total_season_limit: int = Field(default=22, ge=0)


class OwnerCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    card_id: str = Field(..., min_length=1, max_length=50)
    cnic: OptionalCnic = None
    phone: OptionalPhone = None
    email: Optional[str] = Field(None, max_length=120)
    apartment_number: str = Field(..., min_length=1, max_length=20)
    assigned_room_id: Optional[int] = None
    agreement_start_date: Optional[date] = None
    agreement_end_date: Optional[date] = None
    season_limits: SeasonLimitsSchema = SeasonLimitsSchema()

    @field_validator("card_id")
    @classmethod
    def _card(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _agreement(self):
        if self.agreement_start_date and self.agreement_end_date:
            if self.agreement_end_date < self.agreement_start_date:
                raise ValueError("Agreement end date must not be before its start date")
        return self


class OwnerUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    card_id: Optional[str] = Field(None, min_length=1, max_length=50)
    cnic: OptionalCnic = None
    phone: OptionalPhone = None
    email: Optional[str] = Field(None, max_length=120)
    apartment_number: Optional[str] = Field(None, min_length=1, max_length=20)
    assigned_room_id: Optional[int] = None
    agreement_start_date: Optional[date] = None
    agreement_end_date: Optional[date] = None
    season_limits: Optional[SeasonLimitsSchema] = None

    @field_validator("card_id")
    @classmethod
    def _card(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class MarkAttendanceRequest(CamelModel):
    card_id: str
    amount_charged: Decimal = Field(default=0, ge=0)


class OwnerResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    full_name: str
    card_id: str
    cnic: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    apartment_number: str
    assigned_room: Optional[RoomRef] = None
    agreement_start_date: Optional[date] = None
    agreement_end_date: Optional[date] = None
    season_limits: SeasonLimitsSchema
    created_at: datetime


class AttendanceLogResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    date: date
    season: Season
    day_type: DayType
    amount_charged: float = 0
    is_over_stay: bool = False
    marked_by: Optional[EmployeeRef] = Field(None, validation_alias="marker", serialization_alias="markedBy")


class TimelineEntry(AttendanceLogResponse):
    day_name: str


class UsageBreakdownSchema(CamelModel):
    weekend_used: int
    weekday_used: int
    season: Season


class OwnerUsageResponse(CamelModel):
    total_days_used: int
    remaining_days: int
    limit: int
    is_over_stay: bool
    is_today_marked: bool
    current_season: Season
    breakdown: UsageBreakdownSchema
    window_start: date
    window_end: date


# ============== Promo codes ==============

class PromoCodeCreate(CamelModel):
    code: str = Field(..., min_length=3, max_length=30)
    percentage: int = Field(..., ge=1, le=100)
    start_date: date
    end_date: date

    @field_validator("code")
    @classmethod
    def _code(cls, value: str) -> str:
        value = value.strip().upper()
        if not value.isalnum():
            raise ValueError("Promo code may only contain letters and digits")
        return value

    @model_validator(mode="after")
    def _window(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class PromoStatusUpdate(CamelModel):
    status: PromoStatus


class PromoCodeResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    code: str
    percentage: int
    start_date: date
    end_date: date
    status: PromoStatus
    usage_count: int = 0
    created_by: Optional[EmployeeRef] = Field(None, validation_alias="creator", serialization_alias="createdBy")
    created_at: datetime


# ============== Transactions ==============

class TransactionCreate(CamelModel):
    reservation_id: Optional[int] = None
    guest_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0)
    type: TransactionType
    payment_method: PaymentMethod
    description: Optional[str] = None

    @model_validator(mode="after")
    def _source(self):
        if self.reservation_id is None and self.guest_id is None:
            raise ValueError("A transaction needs a reservationId or a guestId")
        return self


class TransactionResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    reservation: Optional[ReservationRef] = None
    guest: Optional[GuestRef] = None
    amount: float
    type: TransactionType
    payment_method: PaymentMethod
    description: Optional[str] = None
    recorded_by: Optional[EmployeeRef] = Field(None, validation_alias="recorder", serialization_alias="recordedBy")
    created_at: datetime


# ============== Invoices ==============

class InvoiceItemResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    description: str
    quantity: int
    unit_price: float
    total: float


class InvoiceResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    invoice_number: str
    guest: Optional[GuestRef] = None
    guest_details: Dict[str, Any] = {}
    room_details: Dict[str, Any] = {}
    items: List[InvoiceItemResponse] = []
    subtotal: float
    discount_amount: float
    promo_percentage: int = 0
    promo_discount: float
    additional_discount: float
    tax_rate: float
    tax_amount: float
    grand_total: float
    advance_adjusted: float
    total_paid: float
    total_refunded: float
    balance_due: float
    status: InvoiceStatus
    issue_date: datetime
    due_date: Optional[datetime] = None
    check_in_at: Optional[datetime] = None
    pdf_path: Optional[str] = None
    created_by: Optional[EmployeeRef] = Field(None, validation_alias="creator", serialization_alias="createdBy")
    created_at: datetime


class InvoiceStatusUpdate(CamelModel):
    status: InvoiceStatus


class PaginatedInvoices(CamelModel):
    success: bool = True
    count: int
    total_pages: int
    current_page: int
    pages: List[Union[int, str]]
    data: List[InvoiceResponse]


# ============== Settings ==============

class SystemAlert(CamelModel):
    message: str = ""
    is_active: bool = False
    type: AlertType = AlertType.INFO


class SettingsResponse(CamelModel):
    id: int = Field(serialization_alias="_id")
    tax_rate: float
    currency_symbol: str
    hotel_name: str
    system_alert: SystemAlert
    updated_at: Optional[datetime] = None


class SettingsUpdate(CamelModel):
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    currency_symbol: Optional[str] = Field(None, min_length=1, max_length=10)
    hotel_name: Optional[str] = Field(None, min_length=1, max_length=100)
    system_alert: Optional[SystemAlert] = None


def validation_message(errors: List[dict]) -> str:
    """First readable message of a pydantic error list"""
    if not errors:
        return "Invalid request"
    error = errors[0]
    message = str(error.get("msg", "Invalid request"))
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    return f"{'.'.join(location)}: {message}" if location else message
