"""
Invoice service
Issues the stay invoice at check-in and keeps its totals in step with the
stay and the money collected against it
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.orm import Session

from hoteldesk.config import settings
from hoteldesk.domain.rules.billing_rules import compute_totals, money, ZERO
from hoteldesk.models.ontology import (
    Invoice, InvoiceItem, InvoiceStatus, Guest, Employee, Transaction, TransactionType
)
from hoteldesk.services.email_service import EmailService
from hoteldesk.services.setting_service import SettingService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def stay_item_description(guest: Guest) -> str:
    room_number = guest.room.room_number if guest.room else ""
    return f"Room {room_number} stay"


class InvoiceService:
    """Invoice service"""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    # ============== Issue and re-total ==============

    def next_invoice_number(self, day: Optional[date] = None) -> str:
        """INV-YYYYMMDD-NNNN, numbered per day"""
        day = day or date.today()
        prefix = f"INV-{day:%Y%m%d}-"
        # continue after the highest suffix so deleted invoices never free a number
        last = self.db.query(Invoice.invoice_number).filter(
            Invoice.invoice_number.like(f"{prefix}%")
        ).order_by(Invoice.invoice_number.desc()).first()
        sequence = int(last[0][len(prefix):]) if last else 0
        return f"{prefix}{sequence + 1:04d}"

    def issue_for_guest(self, guest: Guest, promo_percentage: int = 0,
                        created_by: Optional[Employee] = None) -> Invoice:
        """Create the pending invoice of a new stay; the caller commits"""
        now = datetime.now()
        room = guest.room
        invoice = Invoice(
            invoice_number=self.next_invoice_number(now.date()),
            guest=guest,
            guest_details={
                "fullName": guest.full_name,
                "phone": guest.phone,
                "cnic": guest.cnic,
                "email": guest.email,
                "address": guest.address,
            },
            room_details={
                "roomNumber": room.room_number,
                "category": room.category,
                "bedType": room.bed_type,
                "rate": float(room.rate),
            },
            promo_percentage=promo_percentage or 0,
            tax_rate=SettingService(self.db).get_tax_rate(),
            status=InvoiceStatus.PENDING,
            issue_date=now,
            due_date=now + timedelta(days=settings.INVOICE_DUE_DAYS),
            check_in_at=guest.check_in_at,
            created_by=created_by.id if created_by else None,
        )
        invoice.items.append(InvoiceItem(
            description=stay_item_description(guest),
            quantity=guest.stay_duration,
            unit_price=money(room.rate),
            total=money(room.rate) * guest.stay_duration,
        ))
        self.db.add(invoice)
        self.db.flush()
        self.recalculate(invoice)
        return invoice

    def add_item(self, invoice: Invoice, description: str, quantity: int, unit_price: Decimal) -> InvoiceItem:
        item = InvoiceItem(
            description=description,
            quantity=quantity,
            unit_price=money(unit_price),
            total=money(unit_price) * quantity,
        )
        invoice.items.append(item)
        return item

    def reset_stay(self, invoice: Invoice, guest: Guest) -> None:
        """Replace the stay lines with one line for the actual nights"""
        rate = Decimal(str(invoice.room_details.get("rate") or (guest.room.rate if guest.room else 0)))
        invoice.items.clear()
        self.add_item(invoice, stay_item_description(guest), guest.stay_duration, rate)

    def collected(self, guest_id: int) -> Tuple[Decimal, Decimal, Decimal]:
        """(advance, paid, refunded) recorded against a stay"""
        advance = paid = refunded = ZERO
        transactions = self.db.query(Transaction).filter(Transaction.guest_id == guest_id).all()
        for tx in transactions:
            amount = Decimal(str(tx.amount))
            if tx.type == TransactionType.ADVANCE:
                advance += amount
            elif tx.type == TransactionType.PAYMENT:
                paid += amount
            elif tx.type == TransactionType.REFUND:
                refunded += amount
        return advance, paid, refunded

    def recalculate(self, invoice: Invoice) -> Invoice:
        """Re-total from the lines and the stay's transactions; the caller commits"""
        self.db.flush()
        subtotal = sum((Decimal(str(item.total)) for item in invoice.items), ZERO)
        guest = invoice.guest
        additional = guest.additional_discount if guest else invoice.additional_discount
        advance, paid, refunded = self.collected(guest.id) if guest else (
            invoice.advance_adjusted, invoice.total_paid, invoice.total_refunded
        )

        totals = compute_totals(
            subtotal,
            promo_percentage=invoice.promo_percentage,
            additional_discount=additional,
            tax_rate=invoice.tax_rate,
            advance=advance,
            paid=paid,
            refunded=refunded,
        )
        invoice.subtotal = totals.subtotal
        invoice.promo_discount = totals.promo_discount
        invoice.additional_discount = totals.additional_discount
        invoice.discount_amount = totals.discount_amount
        invoice.tax_amount = totals.tax_amount
        invoice.grand_total = totals.grand_total
        invoice.advance_adjusted = totals.advance_adjusted
        invoice.total_paid = totals.total_paid
        invoice.total_refunded = totals.total_refunded
        invoice.balance_due = totals.balance_due

        # settled invoices flip to paid and back; a cancelled one stays cancelled
        if invoice.status != InvoiceStatus.CANCELLED:
            settled = totals.grand_total > 0 and totals.balance_due <= 0
            invoice.status = InvoiceStatus.PAID if settled else InvoiceStatus.PENDING
        return invoice

    def recalculate_for_guest(self, guest_id: int) -> Optional[Invoice]:
        invoice = self.db.query(Invoice).filter(Invoice.guest_id == guest_id).first()
        if invoice:
            self.recalculate(invoice)
        return invoice

    # ============== Queries ==============

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get_invoice_for_guest(self, guest_id: int) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.guest_id == guest_id).first()

    def get_invoices(self, page: int = 1, limit: int = 10) -> Tuple[int, List[Invoice]]:
        """(total count, one page newest first)"""
        query = self.db.query(Invoice)
        count = query.count()
        invoices = query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).offset(
            (page - 1) * limit
        ).limit(limit).all()
        return count, invoices

    def search_invoices(self, guest_name: Optional[str] = None,
                        room_number: Optional[str] = None,
                        invoice_number: Optional[str] = None) -> List[Invoice]:
        """Case-insensitive match on the guest and room snapshots"""
        query = self.db.query(Invoice)
        if invoice_number:
            query = query.filter(Invoice.invoice_number.ilike(f"%{invoice_number.strip()}%"))
        invoices = query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()

        if guest_name:
            needle = guest_name.strip().lower()
            invoices = [i for i in invoices
                        if needle in str((i.guest_details or {}).get("fullName", "")).lower()]
        if room_number:
            needle = room_number.strip().lower()
            invoices = [i for i in invoices
                        if str((i.room_details or {}).get("roomNumber", "")).lower() == needle]
        return invoices

    # ============== Changes ==============

    def update_status(self, invoice_id: int, status: InvoiceStatus) -> Optional[Invoice]:
        invoice = self.get_invoice(invoice_id)
        if not invoice:
            return None
        invoice.status = status
        self.db.commit()
        self.db.refresh(invoice)
        logger.info("Invoice %s marked %s", invoice.invoice_number, status.value)
        return invoice

    def delete_invoice(self, invoice_id: int) -> bool:
        invoice = self.get_invoice(invoice_id)
        if not invoice:
            return False
        self.db.delete(invoice)
        self.db.commit()
        logger.info("Invoice %s deleted", invoice.invoice_number)
        return True

    # ============== Document and e-mail ==============

    def render_document(self, invoice: Invoice) -> str:
        setting = SettingService(self.db).get_settings()
        template = _env.get_template("invoice.html")
        return template.render(
            invoice=invoice,
            guest=invoice.guest_details or {},
            room=invoice.room_details or {},
            items=invoice.items,
            hotel_name=setting.hotel_name,
            currency=setting.currency_symbol,
        )

    def write_document(self, invoice: Invoice) -> Path:
        """Render to INVOICE_DIR and remember the path"""
        directory = Path(settings.INVOICE_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{invoice.invoice_number}.html"
        path.write_text(self.render_document(invoice), encoding="utf-8")
        invoice.pdf_path = str(path)
        self.db.commit()
        return path

    def download_url(self, invoice: Invoice) -> str:
        return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/api/invoice/{invoice.id}/document"

    def send_email(self, invoice: Invoice) -> bool:
        """E-mail the invoice to the guest; ValueError when no address is on file"""
        recipient = (invoice.guest_details or {}).get("email")
        if not recipient and invoice.guest:
            recipient = invoice.guest.email
        if not recipient:
            raise ValueError("No email address on file for this guest")

        setting = SettingService(self.db).get_settings()
        subject = f"{setting.hotel_name} invoice {invoice.invoice_number}"
        sent = self.email_service.send(recipient, subject, self.render_document(invoice))
        if sent:
            logger.info("Invoice %s emailed to %s", invoice.invoice_number, recipient)
        return sent
