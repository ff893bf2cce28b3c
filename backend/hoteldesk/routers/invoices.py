"""
Invoice routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.domain.pagination import page_count, pagination_range
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import InvoiceResponse, InvoiceStatusUpdate, PaginatedInvoices
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.invoice_service import InvoiceService

router = APIRouter(prefix="/api/invoice", tags=["Invoices"])


def _get_or_404(service: InvoiceService, invoice_id: int):
    invoice = service.get_invoice(invoice_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.get("/get-all-invoices")
def get_all_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """One page of invoices plus the page strip to render"""
    count, invoices = InvoiceService(db).get_invoices(page, limit)
    total_pages = page_count(count, limit)
    return PaginatedInvoices(
        count=count,
        total_pages=total_pages,
        current_page=page,
        pages=pagination_range(total_pages, page),
        data=[InvoiceResponse.model_validate(i) for i in invoices],
    )


@router.get("/search-Invoices")
def search_invoices(
    guest_name: Optional[str] = Query(None, alias="guestName"),
    room_number: Optional[str] = Query(None, alias="roomNumber"),
    invoice_number: Optional[str] = Query(None, alias="invoiceNumber"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    invoices = InvoiceService(db).search_invoices(guest_name, room_number, invoice_number)
    return {"success": True, "data": [InvoiceResponse.model_validate(i) for i in invoices]}


@router.get("/get-Invoice-By-Id/{invoice_id}")
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    invoice = _get_or_404(InvoiceService(db), invoice_id)
    return {"success": True, "data": InvoiceResponse.model_validate(invoice)}


@router.patch("/{invoice_id}/status")
def update_invoice_status(
    invoice_id: int,
    data: InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    invoice = InvoiceService(db).update_status(invoice_id, data.status)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return {"success": True, "message": "Invoice status updated", "data": InvoiceResponse.model_validate(invoice)}


@router.delete("/delete-Invoice/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    if not InvoiceService(db).delete_invoice(invoice_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return {"success": True, "message": "Invoice deleted"}


@router.post("/{invoice_id}/send-email")
def send_invoice_email(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = InvoiceService(db)
    invoice = _get_or_404(service, invoice_id)
    try:
        sent = service.send_email(invoice)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not sent:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send the invoice email")
    return {"success": True, "message": "Invoice sent"}


@router.get("/{invoice_id}/download")
def download_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Link to the printable invoice"""
    service = InvoiceService(db)
    invoice = _get_or_404(service, invoice_id)
    return {"success": True, "url": service.download_url(invoice)}


@router.get("/{invoice_id}/document", response_class=HTMLResponse)
def invoice_document(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = InvoiceService(db)
    invoice = _get_or_404(service, invoice_id)
    path = service.write_document(invoice)
    return HTMLResponse(content=path.read_text(encoding="utf-8"))
