"""
Owner service
Apartment owners, card-scan attendance and seasonal usage
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from hoteldesk.config import settings
from hoteldesk.domain.rules.season_rules import SeasonCalendar, SeasonLimits, OwnerUsage, compute_usage
from hoteldesk.models.ontology import Owner, OwnerAttendance, Room, Employee
from hoteldesk.models.schemas import OwnerCreate, OwnerUpdate, MarkAttendanceRequest
from hoteldesk.services.errors import ConflictError

logger = logging.getLogger(__name__)

RECENT_LOGS = 5


class OwnerService:
    """Owner service"""

    def __init__(self, db: Session, season_calendar: Optional[SeasonCalendar] = None):
        self.db = db
        self.calendar = season_calendar or SeasonCalendar.from_settings(settings)

    # ============== Owners ==============

    def get_owners(self) -> List[Owner]:
        return self.db.query(Owner).order_by(Owner.full_name).all()

    def get_owner(self, owner_id: int) -> Optional[Owner]:
        return self.db.query(Owner).filter(Owner.id == owner_id).first()

    def get_owner_by_card(self, card_id: str) -> Optional[Owner]:
        return self.db.query(Owner).filter(Owner.card_id == card_id.strip().lower()).first()

    def _check_room(self, room_id: Optional[int]) -> None:
        if room_id is not None and not self.db.query(Room).filter(Room.id == room_id).first():
            raise ValueError("Assigned room does not exist")

    def create_owner(self, data: OwnerCreate) -> Owner:
        if self.get_owner_by_card(data.card_id):
            raise ConflictError(f"Card '{data.card_id}' is already assigned to another owner")
        self._check_room(data.assigned_room_id)

        owner_data = data.model_dump(exclude={"season_limits"})
        owner = Owner(**owner_data, **data.season_limits.model_dump())
        self.db.add(owner)
        self.db.commit()
        self.db.refresh(owner)
        logger.info("Owner %s created (apartment %s)", owner.full_name, owner.apartment_number)
        return owner

    def update_owner(self, owner_id: int, data: OwnerUpdate) -> Optional[Owner]:
        owner = self.get_owner(owner_id)
        if not owner:
            return None

        update_data = data.model_dump(exclude_unset=True)
        card_id = update_data.get("card_id")
        if card_id:
            existing = self.get_owner_by_card(card_id)
            if existing and existing.id != owner_id:
                raise ConflictError(f"Card '{card_id}' is already assigned to another owner")
        if "assigned_room_id" in update_data:
            self._check_room(update_data["assigned_room_id"])

        limits = update_data.pop("season_limits", None)
        for key, value in update_data.items():
            if value is not None or key == "assigned_room_id":
                setattr(owner, key, value)
        if limits:
            for key, value in limits.items():
                setattr(owner, key, value)

        if owner.agreement_start_date and owner.agreement_end_date:
            if owner.agreement_end_date < owner.agreement_start_date:
                raise ValueError("Agreement end date must not be before its start date")

        self.db.commit()
        self.db.refresh(owner)
        return owner

    def delete_owner(self, owner_id: int) -> bool:
        owner = self.get_owner(owner_id)
        if not owner:
            return False
        self.db.delete(owner)
        self.db.commit()
        logger.info("Owner %s deleted", owner.full_name)
        return True

    # ============== Attendance ==============

    def usage(self, owner: Owner, today: Optional[date] = None) -> OwnerUsage:
        logged = [log.date for log in owner.attendance]
        return compute_usage(self.calendar, SeasonLimits.from_owner(owner), logged, today)

    def recent_logs(self, owner: Owner, limit: int = RECENT_LOGS) -> List[OwnerAttendance]:
        return self.db.query(OwnerAttendance).filter(
            OwnerAttendance.owner_id == owner.id
        ).order_by(OwnerAttendance.date.desc()).limit(limit).all()

    def scan(self, card_id: str, today: Optional[date] = None) -> Optional[dict]:
        """Card lookup at the desk: the owner, current usage and the last logs"""
        owner = self.get_owner_by_card(card_id)
        if not owner:
            return None
        return {
            "owner": owner,
            "usage": self.usage(owner, today),
            "recent_logs": self.recent_logs(owner),
        }

    def mark_attendance(self, data: MarkAttendanceRequest, marked_by: Optional[Employee] = None,
                        today: Optional[date] = None) -> Optional[Tuple[OwnerAttendance, OwnerUsage]]:
        """
        Record today's visit

        Returns (log, usage after marking), or None for an unknown card.
        The overstay flag reflects the allowance before this mark.
        """
        today = today or date.today()
        owner = self.get_owner_by_card(data.card_id)
        if not owner:
            return None

        if owner.agreement_start_date and today < owner.agreement_start_date:
            raise ValueError("Owner agreement has not started yet")
        if owner.agreement_end_date and today > owner.agreement_end_date:
            raise ValueError("Owner agreement has expired")

        before = self.usage(owner, today)
        if before.is_today_marked:
            raise ConflictError("Attendance already marked for today")

        amount = Decimal(str(data.amount_charged or 0))
        if before.is_over_stay and amount <= 0:
            logger.warning("Owner %s is over their allowance and was not charged", owner.card_id)

        log = OwnerAttendance(
            owner=owner,
            date=today,
            season=self.calendar.season_for(today),
            day_type=self.calendar.day_type(today),
            amount_charged=amount,
            is_over_stay=before.is_over_stay,
            marked_by=marked_by.id if marked_by else None,
        )
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        self.db.refresh(owner)
        logger.info("Attendance marked for owner %s on %s (%s, %s)",
                    owner.card_id, today, log.season.value, log.day_type.value)
        return log, self.usage(owner, today)

    def timeline(self, owner_id: int) -> Optional[List[dict]]:
        """Every attendance log of an owner, newest first"""
        owner = self.get_owner(owner_id)
        if not owner:
            return None
        logs = self.db.query(OwnerAttendance).filter(
            OwnerAttendance.owner_id == owner_id
        ).order_by(OwnerAttendance.date.desc()).all()
        return [
            {
                "id": log.id,
                "date": log.date,
                "day_name": log.date.strftime("%A"),
                "season": log.season,
                "day_type": log.day_type,
                "amount_charged": log.amount_charged or 0,
                "is_over_stay": log.is_over_stay,
                "marker": log.marker,
            }
            for log in logs
        ]
