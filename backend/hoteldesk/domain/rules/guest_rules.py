"""
hoteldesk/domain/rules/guest_rules.py

Form validation rules for guests, reservations and owners

Phone numbers are Pakistani mobiles (03XXXXXXXXX). A "+92" / "92" prefix is
accepted and normalised to the leading 0. CNIC numbers are 13 digits and are
stored in the dashed form #####-#######-#.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

PHONE_PATTERN = re.compile(r"^03\d{9}$")
CNIC_PATTERN = re.compile(r"^\d{13}$")
CNIC_DASHED_PATTERN = re.compile(r"^\d{5}-\d{7}-\d$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PHONE_ERROR = "Phone number must be 11 digits starting with 03"
CNIC_ERROR = "CNIC must be 13 digits (#####-#######-#)"
DATE_RANGE_ERROR = "Check-out date must be after check-in date"
PAST_DATE_ERROR = "Check-in date cannot be in the past"

_SEPARATORS = re.compile(r"[\s\-()]")


def normalize_phone(value: str) -> str:
    """Normalise a phone number or raise ValueError"""
    digits = _SEPARATORS.sub("", value or "")
    if digits.startswith("+92"):
        digits = "0" + digits[3:]
    elif digits.startswith("92") and len(digits) == 12:
        digits = "0" + digits[2:]
    if not PHONE_PATTERN.match(digits):
        raise ValueError(PHONE_ERROR)
    return digits


def normalize_cnic(value: str) -> str:
    """Normalise a CNIC to #####-#######-# or raise ValueError"""
    raw = (value or "").strip()
    if CNIC_DASHED_PATTERN.match(raw):
        return raw
    if not CNIC_PATTERN.match(raw):
        raise ValueError(CNIC_ERROR)
    return f"{raw[:5]}-{raw[5:12]}-{raw[12]}"


def is_valid_phone(value: str) -> bool:
    try:
        normalize_phone(value)
        return True
    except ValueError:
        return False


def is_valid_cnic(value: str) -> bool:
    try:
        normalize_cnic(value)
        return True
    except ValueError:
        return False


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and bool(EMAIL_PATTERN.match(value))


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def validate_date_range(start: Union[date, datetime], end: Union[date, datetime],
                        allow_past: bool = True, today: Optional[date] = None) -> None:
    """
    Reject ranges whose end is not strictly after the start

    Args:
        start: check-in date or datetime
        end: check-out date or datetime
        allow_past: when False, a start before today is rejected
        today: injectable "today" for tests
    """
    if _as_date(end) <= _as_date(start):
        raise ValueError(DATE_RANGE_ERROR)
    if not allow_past:
        today = today or date.today()
        if _as_date(start) < today:
            raise ValueError(PAST_DATE_ERROR)
