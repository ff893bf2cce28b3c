"""
Reservation service
Future-dated bookings; a reservation holds its room until it is cancelled
or checked in
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session

from hoteldesk.domain.rules.guest_rules import validate_date_range
from hoteldesk.models.ontology import (
    Reservation, ReservationStatus, RoomStatus, Employee, Guest, LIVE_RESERVATION_STATUSES
)
from hoteldesk.models.schemas import (
    ReservationCreate, ReservationSwap, ReservationCheckIn, GuestCreate, CHECKOUT_TIME,
    validation_message,
)
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.guest_service import GuestService
from hoteldesk.services.room_service import RoomService

logger = logging.getLogger(__name__)


class ReservationService:
    """Reservation service"""

    def __init__(self, db: Session):
        self.db = db
        self.rooms = RoomService(db)

    def get_reservations(self, status: Optional[ReservationStatus] = None) -> List[Reservation]:
        query = self.db.query(Reservation)
        if status:
            query = query.filter(Reservation.status == status)
        return query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def create_reservation(self, data: ReservationCreate, created_by: Optional[Employee] = None) -> Reservation:
        room = self.rooms.get_room_by_number(data.room_number)
        if not room:
            raise ValueError(f"Room {data.room_number} does not exist")
        if room.status == RoomStatus.MAINTENANCE:
            raise ValueError(f"Room {room.room_number} is under maintenance")
        if not self.rooms.is_room_free(room, data.start_date, data.end_date):
            raise ConflictError(f"Room {room.room_number} is not available for the selected dates")

        reservation = Reservation(
            guest_name=data.guest_name.strip(),
            address=data.address,
            email=data.email,
            phone_no=data.phone_no,
            cnic=data.cnic,
            room=room,
            start_date=data.start_date,
            end_date=data.end_date,
            status=ReservationStatus.RESERVED,
            created_by=created_by.id if created_by else None,
        )
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        logger.info("Reservation %s: room %s %s..%s", reservation.id, room.room_number,
                    reservation.start_date, reservation.end_date)
        return reservation

    def delete_reservation(self, reservation_id: int) -> bool:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return False
        if reservation.status == ReservationStatus.CHECKED_IN:
            raise ValueError("A checked-in reservation cannot be deleted")
        if reservation.transactions:
            raise ValueError("Reservation has recorded payments; cancel it instead")
        self.db.delete(reservation)
        self.db.commit()
        logger.info("Reservation %s deleted", reservation_id)
        return True

    def cancel_reservation(self, reservation_id: int) -> Optional[Reservation]:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return None
        if reservation.status not in LIVE_RESERVATION_STATUSES:
            raise ConflictError(f"Reservation is already {reservation.status.value}")

        reservation.status = ReservationStatus.CANCELLED
        self.db.commit()
        self.db.refresh(reservation)
        logger.info("Reservation %s cancelled", reservation_id)
        return reservation

    def swap_reservation(self, reservation_id: int, data: ReservationSwap,
                         today: Optional[date] = None) -> Optional[Reservation]:
        """Move a live reservation to another room and/or other dates"""
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return None
        if reservation.status not in LIVE_RESERVATION_STATUSES:
            raise ValueError(f"Cannot change a reservation that is {reservation.status.value}")

        room = reservation.room
        if data.room_number:
            room = self.rooms.get_room_by_number(data.room_number)
            if not room:
                raise ValueError(f"Room {data.room_number} does not exist")
            if room.status == RoomStatus.MAINTENANCE:
                raise ValueError(f"Room {room.room_number} is under maintenance")

        start = data.start_date or reservation.start_date
        end = data.end_date or reservation.end_date
        validate_date_range(start, end, allow_past=data.start_date is None, today=today)

        if not self.rooms.is_room_free(room, start, end, exclude_reservation_id=reservation.id):
            raise ConflictError(f"Room {room.room_number} is not available for the selected dates")

        old_room = reservation.room.room_number if reservation.room else None
        reservation.room = room
        reservation.start_date = start
        reservation.end_date = end
        self.db.commit()
        self.db.refresh(reservation)
        logger.info("Reservation %s moved: room %s -> %s, %s..%s",
                    reservation.id, old_room, room.room_number, start, end)
        return reservation

    def check_in(self, reservation_id: int, data: ReservationCheckIn,
                 created_by: Optional[Employee] = None) -> Optional[Guest]:
        """Turn a reservation into a stay"""
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return None
        if reservation.status not in LIVE_RESERVATION_STATUSES:
            raise ConflictError(f"Reservation is already {reservation.status.value}")
        if not reservation.room:
            raise ValueError("The reserved room no longer exists")

        try:
            guest_data = GuestCreate(
                full_name=reservation.guest_name,
                address=reservation.address or "",
                phone=reservation.phone_no,
                cnic=reservation.cnic,
                email=reservation.email,
                room_number=reservation.room.room_number,
                check_out_at=data.check_out_at or datetime.combine(reservation.end_date, CHECKOUT_TIME),
                apply_discount=data.apply_discount,
                promo_code=data.promo_code,
                additional_discount=data.additional_discount,
                reservation_id=reservation.id,
            )
        except ValidationError as e:
            raise ValueError(validation_message(e.errors()))
        return GuestService(self.db).check_in(guest_data, created_by)
