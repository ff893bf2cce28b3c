"""
Guest routes
Check-in, checkout, stay extension and guest details
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import (
    GuestCreate, GuestUpdate, GuestExtend, GuestResponse, InvoiceResponse, TransactionResponse
)
from hoteldesk.security.auth import get_current_user
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.guest_service import GuestService

router = APIRouter(prefix="/api/guests", tags=["Guests"])


@router.get("/get-all-guest")
def get_all_guests(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    guests = GuestService(db).get_guests()
    return {"success": True, "guests": [GuestResponse.model_validate(g) for g in guests]}


@router.get("/get-Guest-By-Id/{guest_id}")
def get_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Guest with its invoice and transactions"""
    detail = GuestService(db).get_guest_detail(guest_id)
    if not detail:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    invoice = detail["invoice"]
    return {
        "success": True,
        "guest": GuestResponse.model_validate(detail["guest"]),
        "invoice": InvoiceResponse.model_validate(invoice) if invoice else None,
        "transactions": [TransactionResponse.model_validate(t) for t in detail["transactions"]],
    }


@router.post("/create-guest", status_code=status.HTTP_201_CREATED)
def create_guest(
    data: GuestCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Check a guest in"""
    service = GuestService(db)
    try:
        guest = service.check_in(data, current_user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    invoice = service.invoices.get_invoice_for_guest(guest.id)
    return {
        "success": True,
        "message": "Guest checked in",
        "guest": GuestResponse.model_validate(guest),
        "invoice": InvoiceResponse.model_validate(invoice) if invoice else None,
    }


@router.patch("/update-guest/{guest_id}")
def update_guest(
    guest_id: int,
    data: GuestUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    guest = GuestService(db).update_guest(guest_id, data)
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return {"success": True, "message": "Guest updated", "guest": GuestResponse.model_validate(guest)}


@router.patch("/check-out-Guest/{guest_id}/checkout")
def check_out_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = GuestService(db)
    try:
        guest = service.check_out(guest_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")

    invoice = service.invoices.get_invoice_for_guest(guest.id)
    return {
        "success": True,
        "message": "Guest checked out",
        "guest": GuestResponse.model_validate(guest),
        "invoice": InvoiceResponse.model_validate(invoice) if invoice else None,
    }


@router.post("/{guest_id}/extend")
def extend_stay(
    guest_id: int,
    data: GuestExtend,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = GuestService(db)
    try:
        guest = service.extend_stay(guest_id, data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")

    invoice = service.invoices.get_invoice_for_guest(guest.id)
    return {
        "success": True,
        "message": "Stay extended",
        "guest": GuestResponse.model_validate(guest),
        "invoice": InvoiceResponse.model_validate(invoice) if invoice else None,
    }
