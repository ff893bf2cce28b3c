"""
Guest service
A guest row is one stay: created at check-in, closed at checkout
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from hoteldesk.domain.rules.billing_rules import nights_between, money
from hoteldesk.models.ontology import (
    Guest, GuestStatus, RoomStatus, Cleanliness, Reservation, ReservationStatus,
    InvoiceStatus, Transaction, Employee, LIVE_RESERVATION_STATUSES
)
from hoteldesk.models.schemas import GuestCreate, GuestUpdate, GuestExtend
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.invoice_service import InvoiceService
from hoteldesk.services.promo_code_service import PromoCodeService
from hoteldesk.services.room_service import RoomService

logger = logging.getLogger(__name__)


class GuestService:
    """Guest service"""

    def __init__(self, db: Session, invoice_service: Optional[InvoiceService] = None):
        self.db = db
        self.rooms = RoomService(db)
        self.invoices = invoice_service or InvoiceService(db)

    def get_guests(self) -> List[Guest]:
        return self.db.query(Guest).order_by(Guest.created_at.desc(), Guest.id.desc()).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def get_transactions(self, guest: Guest) -> List[Transaction]:
        """Money recorded against the stay or its reservation, newest first"""
        conditions = [Transaction.guest_id == guest.id]
        if guest.reservation_id:
            conditions.append(Transaction.reservation_id == guest.reservation_id)
        return self.db.query(Transaction).filter(or_(*conditions)).order_by(
            Transaction.created_at.desc(), Transaction.id.desc()
        ).all()

    def get_guest_detail(self, guest_id: int) -> Optional[dict]:
        guest = self.get_guest(guest_id)
        if not guest:
            return None
        return {
            "guest": guest,
            "invoice": self.invoices.get_invoice_for_guest(guest.id),
            "transactions": self.get_transactions(guest),
        }

    # ============== Check-in ==============

    def check_in(self, data: GuestCreate, created_by: Optional[Employee] = None) -> Guest:
        """
        Check a guest into a room

        The room must be free from check-in to the expected checkout. A
        reservation, when given, is consumed: it turns checked-in and its
        advances move onto the stay. A pending invoice is issued.
        """
        room = self.rooms.get_room_by_number(data.room_number)
        if not room:
            raise ValueError(f"Room {data.room_number} does not exist")
        if room.status == RoomStatus.MAINTENANCE:
            raise ValueError(f"Room {room.room_number} is under maintenance")
        if room.status == RoomStatus.OCCUPIED:
            raise ConflictError(f"Room {room.room_number} is occupied")

        check_in_at = data.check_in_at or datetime.now()

        reservation = None
        if data.reservation_id is not None:
            reservation = self.db.query(Reservation).filter(Reservation.id == data.reservation_id).first()
            if not reservation:
                raise ValueError("Reservation not found")
            if reservation.status not in LIVE_RESERVATION_STATUSES:
                raise ConflictError(f"Reservation is already {reservation.status.value}")

        start = check_in_at.date()
        end = max(data.check_out_at.date(), start + timedelta(days=1))
        if not self.rooms.is_room_free(room, start, end,
                                       exclude_reservation_id=reservation.id if reservation else None):
            raise ConflictError(f"Room {room.room_number} is not available for the selected dates")

        promo_percentage = 0
        if data.promo_code:
            promo = PromoCodeService(self.db).redeem(data.promo_code, today=start)
            promo_percentage = promo.percentage

        nights = nights_between(check_in_at, data.check_out_at)
        guest = Guest(
            full_name=data.full_name.strip(),
            address=data.address,
            phone=data.phone,
            cnic=data.cnic,
            email=data.email,
            room=room,
            reservation=reservation,
            check_in_at=check_in_at,
            check_out_at=data.check_out_at,
            stay_duration=nights,
            apply_discount=data.apply_discount or bool(data.promo_code),
            promo_code=data.promo_code.strip().upper() if data.promo_code else None,
            additional_discount=money(data.additional_discount),
            status=GuestStatus.CHECKED_IN,
            total_rent=money(room.rate) * nights,
            created_by=created_by.id if created_by else None,
        )
        self.db.add(guest)
        room.status = RoomStatus.OCCUPIED
        self.db.flush()

        if reservation:
            reservation.status = ReservationStatus.CHECKED_IN
            for tx in reservation.transactions:
                tx.guest_id = guest.id

        self.invoices.issue_for_guest(guest, promo_percentage, created_by)
        self.db.commit()
        self.db.refresh(guest)
        logger.info("Guest %s checked into room %s for %s night(s)",
                    guest.full_name, room.room_number, nights)
        return guest

    # ============== Updates ==============

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Optional[Guest]:
        guest = self.get_guest(guest_id)
        if not guest:
            return None

        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is not None:
                setattr(guest, key, value)

        invoice = self.invoices.get_invoice_for_guest(guest.id)
        if invoice and invoice.status != InvoiceStatus.PAID:
            # keep the snapshot in line with corrected details
            details = dict(invoice.guest_details or {})
            details.update({
                "fullName": guest.full_name, "phone": guest.phone,
                "cnic": guest.cnic, "email": guest.email, "address": guest.address,
            })
            invoice.guest_details = details

        self.db.commit()
        self.db.refresh(guest)
        return guest

    def check_out(self, guest_id: int, now: Optional[datetime] = None) -> Optional[Guest]:
        """Close the stay and bill the nights actually spent"""
        guest = self.get_guest(guest_id)
        if not guest:
            return None
        if guest.status == GuestStatus.CHECKED_OUT:
            raise ValueError("Guest has already checked out")

        now = now or datetime.now()
        guest.check_out_at = now
        guest.stay_duration = nights_between(guest.check_in_at, now)
        rate = guest.room.rate if guest.room else Decimal("0")
        guest.total_rent = money(rate) * guest.stay_duration
        guest.status = GuestStatus.CHECKED_OUT

        if guest.room:
            guest.room.status = RoomStatus.AVAILABLE
            guest.room.cleanliness = Cleanliness.DIRTY

        invoice = self.invoices.get_invoice_for_guest(guest.id)
        if invoice:
            self.invoices.reset_stay(invoice, guest)
            self.invoices.recalculate(invoice)

        self.db.commit()
        self.db.refresh(guest)
        logger.info("Guest %s checked out after %s night(s)", guest.full_name, guest.stay_duration)
        return guest

    def extend_stay(self, guest_id: int, data: GuestExtend, now: Optional[datetime] = None) -> Optional[Guest]:
        """Move the expected checkout later and bill the extra nights"""
        guest = self.get_guest(guest_id)
        if not guest:
            return None
        if guest.status != GuestStatus.CHECKED_IN:
            raise ValueError("Only checked-in guests can extend their stay")

        now = now or datetime.now()
        new_checkout = data.new_checkout_date
        old_checkout = guest.check_out_at
        if new_checkout.date() <= old_checkout.date():
            raise ValueError("New checkout date must be after the current checkout date")
        if new_checkout <= now:
            raise ValueError("New checkout date must be in the future")

        room = guest.room
        if not self.rooms.is_room_free(room, old_checkout.date(), new_checkout.date(),
                                       exclude_guest_id=guest.id):
            raise ConflictError(f"Room {room.room_number} is booked during the extension")

        extra_nights = nights_between(old_checkout.date(), new_checkout.date())
        guest.check_out_at = new_checkout
        guest.stay_duration = nights_between(guest.check_in_at, new_checkout)
        guest.total_rent = money(room.rate) * guest.stay_duration
        guest.additional_discount = money(guest.additional_discount or 0) + money(data.additional_discount)

        invoice = self.invoices.get_invoice_for_guest(guest.id)
        if invoice:
            self.invoices.add_item(invoice, f"Stay extension ({extra_nights} night(s))",
                                   extra_nights, room.rate)
            self.invoices.recalculate(invoice)

        self.db.commit()
        self.db.refresh(guest)
        logger.info("Guest %s extended to %s (+%s night(s))",
                    guest.full_name, new_checkout.date(), extra_nights)
        return guest
