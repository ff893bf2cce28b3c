"""
Promo code service
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from hoteldesk.models.ontology import PromoCode, PromoStatus, Employee
from hoteldesk.models.schemas import PromoCodeCreate
from hoteldesk.services.errors import ConflictError

logger = logging.getLogger(__name__)


class PromoCodeService:
    """Promo code service"""

    def __init__(self, db: Session):
        self.db = db

    def get_promo_codes(self) -> List[PromoCode]:
        return self.db.query(PromoCode).order_by(PromoCode.created_at.desc()).all()

    def get_promo_code(self, promo_id: int) -> Optional[PromoCode]:
        return self.db.query(PromoCode).filter(PromoCode.id == promo_id).first()

    def get_by_code(self, code: str) -> Optional[PromoCode]:
        return self.db.query(PromoCode).filter(PromoCode.code == code.strip().upper()).first()

    def create_promo_code(self, data: PromoCodeCreate, created_by: Employee) -> PromoCode:
        if self.get_by_code(data.code):
            raise ConflictError(f"Promo code '{data.code}' already exists")

        promo = PromoCode(**data.model_dump(), created_by=created_by.id)
        self.db.add(promo)
        self.db.commit()
        self.db.refresh(promo)
        logger.info("Promo code %s created (%s%%)", promo.code, promo.percentage)
        return promo

    def update_status(self, promo_id: int, status: PromoStatus) -> Optional[PromoCode]:
        promo = self.get_promo_code(promo_id)
        if not promo:
            return None
        promo.status = status
        self.db.commit()
        self.db.refresh(promo)
        return promo

    def validate(self, code: str, today: Optional[date] = None) -> PromoCode:
        """
        Return the promo code if it can be used today

        Raises ValueError naming the reason otherwise.
        """
        today = today or date.today()
        promo = self.get_by_code(code or "")
        if not promo:
            raise ValueError("Invalid promo code")
        if promo.status != PromoStatus.ACTIVE:
            raise ValueError("Promo code is inactive")
        if today < promo.start_date:
            raise ValueError("Promo code is not yet valid")
        if today > promo.end_date:
            raise ValueError("Promo code has expired")
        return promo

    def redeem(self, code: str, today: Optional[date] = None) -> PromoCode:
        """Validate and count one use; the caller commits"""
        promo = self.validate(code, today)
        promo.usage_count = (promo.usage_count or 0) + 1
        return promo
