"""
Client-side form checks

Each validator takes the form as a camelCase dict (the same shape that is
posted to the API) and returns {field: message}; an empty dict means the form
can be sent.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional

from hoteldesk.domain.rules.guest_rules import (
    is_valid_phone, is_valid_cnic, is_valid_email, validate_date_range,
    PHONE_ERROR, CNIC_ERROR
)

REQUIRED = "This field is required"
EMAIL_ERROR = "Enter a valid email address"
DATE_ERROR = "Enter a valid date"
AGREEMENT_ERROR = "Agreement end date must not be before its start date"


class FormError(ValueError):
    """Raised by stores when a form fails its client-side checks"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(next(iter(errors.values())))
        self.errors = errors


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def _require(form: Dict[str, Any], errors: Dict[str, str], *fields: str) -> None:
    for field in fields:
        value = form.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = REQUIRED


def _check_contact(form: Dict[str, Any], errors: Dict[str, str], phone_field: str = "phone") -> None:
    if form.get(phone_field) and not is_valid_phone(form[phone_field]):
        errors[phone_field] = PHONE_ERROR
    if form.get("cnic") and not is_valid_cnic(form["cnic"]):
        errors["cnic"] = CNIC_ERROR
    if form.get("email") and not is_valid_email(form["email"]):
        errors["email"] = EMAIL_ERROR


def _check_range(form: Dict[str, Any], errors: Dict[str, str], start_field: str, end_field: str,
                 allow_past: bool = True, today: Optional[date] = None) -> None:
    if start_field in errors or end_field in errors:
        return
    start, end = _parse_date(form.get(start_field)), _parse_date(form.get(end_field))
    if start is None:
        errors[start_field] = DATE_ERROR
    if end is None:
        errors[end_field] = DATE_ERROR
    if start is None or end is None:
        return
    try:
        validate_date_range(start, end, allow_past=allow_past, today=today)
    except ValueError as e:
        errors[end_field if end <= start else start_field] = str(e)


def validate_guest_form(form: Dict[str, Any], today: Optional[date] = None) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _require(form, errors, "fullName", "phone", "cnic", "roomNumber", "checkOutAt")
    _check_contact(form, errors)
    if "checkOutAt" not in errors:
        check_in = form.get("checkInAt") or (today or date.today()).isoformat()
        _check_range({"checkInAt": check_in, "checkOutAt": form["checkOutAt"]}, errors,
                     "checkInAt", "checkOutAt")
    return errors


def validate_reservation_form(form: Dict[str, Any], today: Optional[date] = None) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _require(form, errors, "guestName", "phoneNo", "cnic", "roomNumber", "startDate", "endDate")
    _check_contact(form, errors, phone_field="phoneNo")
    _check_range(form, errors, "startDate", "endDate", allow_past=False, today=today)
    return errors


def validate_owner_form(form: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _require(form, errors, "fullName", "cardId", "apartmentNumber")
    _check_contact(form, errors)
    start, end = _parse_date(form.get("agreementStartDate")), _parse_date(form.get("agreementEndDate"))
    if start and end and end < start:
        errors["agreementEndDate"] = AGREEMENT_ERROR
    return errors
