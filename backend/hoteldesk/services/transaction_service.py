"""
Transaction service
Money recorded against a reservation or a stay; every change re-totals the
stay's invoice
"""
import logging
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session

from hoteldesk.domain.rules.billing_rules import money, ZERO
from hoteldesk.models.ontology import Transaction, TransactionType, Reservation, Guest, Employee
from hoteldesk.models.schemas import TransactionCreate
from hoteldesk.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


class TransactionService:
    """Transaction service"""

    def __init__(self, db: Session, invoice_service: Optional[InvoiceService] = None):
        self.db = db
        self.invoices = invoice_service or InvoiceService(db)

    def get_transactions(self, reservation_id: Optional[int] = None,
                         guest_id: Optional[int] = None) -> List[Transaction]:
        query = self.db.query(Transaction)
        if reservation_id is not None:
            query = query.filter(Transaction.reservation_id == reservation_id)
        if guest_id is not None:
            query = query.filter(Transaction.guest_id == guest_id)
        return query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self.db.query(Transaction).filter(Transaction.id == transaction_id).first()

    def net_collected(self, reservation_id: Optional[int] = None, guest_id: Optional[int] = None) -> Decimal:
        """Money in minus refunds for one source"""
        total = ZERO
        for tx in self.get_transactions(reservation_id=reservation_id, guest_id=guest_id):
            amount = Decimal(str(tx.amount))
            total += -amount if tx.type == TransactionType.REFUND else amount
        return total

    def add_transaction(self, data: TransactionCreate, recorded_by: Optional[Employee] = None) -> Transaction:
        reservation = None
        guest = None
        if data.reservation_id is not None:
            reservation = self.db.query(Reservation).filter(Reservation.id == data.reservation_id).first()
            if not reservation:
                raise ValueError("Reservation not found")
        if data.guest_id is not None:
            guest = self.db.query(Guest).filter(Guest.id == data.guest_id).first()
            if not guest:
                raise ValueError("Guest not found")
        if reservation and guest is None:
            # money taken on a reservation that is already in house belongs to the stay
            guest = self.db.query(Guest).filter(Guest.reservation_id == reservation.id).first()

        amount = money(data.amount)
        if data.type == TransactionType.REFUND:
            # a stay carries its reservation's money, so the stay is the source when known
            if guest:
                collected = self.net_collected(guest_id=guest.id)
            else:
                collected = self.net_collected(reservation_id=reservation.id)
            if amount > collected:
                raise ValueError(f"Refund cannot exceed the amount collected ({collected})")

        tx = Transaction(
            reservation=reservation,
            guest=guest,
            amount=amount,
            type=data.type,
            payment_method=data.payment_method,
            description=data.description,
            recorded_by=recorded_by.id if recorded_by else None,
        )
        self.db.add(tx)
        if guest:
            self.invoices.recalculate_for_guest(guest.id)
        self.db.commit()
        self.db.refresh(tx)
        logger.info("%s of %s recorded (%s)", data.type.value, amount,
                    f"guest {guest.id}" if guest else f"reservation {reservation.id}")
        return tx

    def delete_transaction(self, transaction_id: int) -> bool:
        tx = self.get_transaction(transaction_id)
        if not tx:
            return False
        guest_id = tx.guest_id
        self.db.delete(tx)
        if guest_id:
            self.invoices.recalculate_for_guest(guest_id)
        self.db.commit()
        logger.info("Transaction %s deleted", transaction_id)
        return True
