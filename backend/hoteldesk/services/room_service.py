"""
Room service
Room inventory, availability and the per-room schedule
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Set
from sqlalchemy import func
from sqlalchemy.orm import Session

from hoteldesk.domain.rules.billing_rules import overlaps
from hoteldesk.domain.rules.guest_rules import DATE_RANGE_ERROR
from hoteldesk.models.ontology import (
    Room, RoomStatus, Guest, GuestStatus, Reservation, Owner, LIVE_RESERVATION_STATUSES
)
from hoteldesk.models.schemas import RoomCreate, RoomUpdate
from hoteldesk.services.errors import ConflictError

logger = logging.getLogger(__name__)

PRESIDENTIAL = "presidential"


def stay_dates(guest: Guest):
    """A stay as a half-open [first night, checkout day) date interval"""
    start = guest.check_in_at.date()
    end = guest.check_out_at.date()
    return start, max(end, start + timedelta(days=1))


class RoomService:
    """Room service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Lookups ==============

    def get_rooms(self) -> List[Room]:
        return self.db.query(Room).order_by(Room.room_number).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def get_room_by_number(self, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.room_number == room_number.strip()).first()

    def get_presidential_rooms(self) -> List[Room]:
        return self.db.query(Room).filter(
            func.lower(Room.category) == PRESIDENTIAL
        ).order_by(Room.room_number).all()

    # ============== Availability ==============

    def busy_room_ids(self, start: date, end: date,
                      exclude_guest_id: Optional[int] = None,
                      exclude_reservation_id: Optional[int] = None) -> Set[int]:
        """Rooms holding a checked-in stay or a live reservation that overlaps [start, end)"""
        busy = set()

        guests = self.db.query(Guest).filter(Guest.status == GuestStatus.CHECKED_IN).all()
        for guest in guests:
            if guest.id == exclude_guest_id:
                continue
            g_start, g_end = stay_dates(guest)
            if overlaps(start, end, g_start, g_end):
                busy.add(guest.room_id)

        reservations = self.db.query(Reservation).filter(
            Reservation.status.in_(LIVE_RESERVATION_STATUSES)
        ).all()
        for reservation in reservations:
            if reservation.id == exclude_reservation_id:
                continue
            if overlaps(start, end, reservation.start_date, reservation.end_date):
                busy.add(reservation.room_id)

        return busy

    def is_room_free(self, room: Room, start: date, end: date,
                     exclude_guest_id: Optional[int] = None,
                     exclude_reservation_id: Optional[int] = None) -> bool:
        if room.status == RoomStatus.MAINTENANCE:
            return False
        return room.id not in self.busy_room_ids(
            start, end,
            exclude_guest_id=exclude_guest_id,
            exclude_reservation_id=exclude_reservation_id,
        )

    def get_available_rooms(self, checkin: Optional[date] = None,
                            checkout: Optional[date] = None) -> List[Room]:
        """
        Rooms that can be booked

        Without dates this is the rooms currently marked available. With
        dates, any room not under maintenance and free for [checkin, checkout).
        """
        if checkin is None or checkout is None:
            return self.db.query(Room).filter(
                Room.status == RoomStatus.AVAILABLE
            ).order_by(Room.room_number).all()

        if checkout <= checkin:
            raise ValueError(DATE_RANGE_ERROR)

        busy = self.busy_room_ids(checkin, checkout)
        return [
            room for room in self.get_rooms()
            if room.status != RoomStatus.MAINTENANCE and room.id not in busy
        ]

    # ============== CRUD ==============

    def create_room(self, data: RoomCreate) -> Room:
        if self.get_room_by_number(data.room_number):
            raise ConflictError(f"Room number '{data.room_number}' already exists")

        room = Room(**data.model_dump())
        room.room_number = room.room_number.strip()
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        logger.info("Room %s created", room.room_number)
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Room not found")

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get('room_number'):
            existing = self.get_room_by_number(update_data['room_number'])
            if existing and existing.id != room_id:
                raise ConflictError(f"Room number '{update_data['room_number']}' already exists")

        for key, value in update_data.items():
            if value is not None:
                setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int) -> bool:
        """Delete a room that is neither occupied nor booked"""
        room = self.get_room(room_id)
        if not room:
            return False

        in_house = self.db.query(Guest).filter(
            Guest.room_id == room_id, Guest.status == GuestStatus.CHECKED_IN
        ).count()
        if room.status == RoomStatus.OCCUPIED or in_house:
            raise ConflictError("Cannot delete an occupied room")

        booked = self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.status.in_(LIVE_RESERVATION_STATUSES)
        ).count()
        if booked:
            raise ConflictError(f"Room has {booked} active reservation(s)")

        self.db.query(Owner).filter(Owner.assigned_room_id == room_id).update(
            {Owner.assigned_room_id: None}, synchronize_session=False
        )
        self.db.delete(room)
        self.db.commit()
        logger.info("Room %s deleted", room.room_number)
        return True

    # ============== Timeline ==============

    def get_timeline(self, room_id: int) -> Optional[List[dict]]:
        """Checked-in stays and live reservations of a room, by start"""
        room = self.get_room(room_id)
        if not room:
            return None

        entries = []
        guests = self.db.query(Guest).filter(
            Guest.room_id == room_id, Guest.status == GuestStatus.CHECKED_IN
        ).all()
        for guest in guests:
            entries.append({
                "type": "Guest (Checked-in)",
                "name": guest.full_name,
                "start_date": guest.check_in_at,
                "end_date": guest.check_out_at,
                "status": guest.status.value,
            })

        reservations = self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.status.in_(LIVE_RESERVATION_STATUSES)
        ).all()
        for reservation in reservations:
            entries.append({
                "type": "Reservation",
                "name": reservation.guest_name,
                "start_date": datetime.combine(reservation.start_date, time.min),
                "end_date": datetime.combine(reservation.end_date, time.min),
                "status": reservation.status.value,
            })

        entries.sort(key=lambda e: e["start_date"])
        return entries
