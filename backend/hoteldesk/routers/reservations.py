"""
Reservation routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee, ReservationStatus
from hoteldesk.models.schemas import (
    ReservationCreate, ReservationSwap, ReservationCheckIn, ReservationResponse, GuestResponse
)
from hoteldesk.security.auth import get_current_user
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.reservation_service import ReservationService

router = APIRouter(prefix="/api/reservations", tags=["Reservations"])


@router.get("")
def list_reservations(
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    reservations = ReservationService(db).get_reservations(status_filter)
    return {"success": True, "reservations": [ReservationResponse.model_validate(r) for r in reservations]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        reservation = ReservationService(db).create_reservation(data, current_user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {
        "success": True,
        "message": "Reservation created",
        "reservation": ReservationResponse.model_validate(reservation),
    }


@router.get("/{reservation_id}")
def get_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    reservation = ReservationService(db).get_reservation(reservation_id)
    if not reservation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return {"success": True, "reservation": ReservationResponse.model_validate(reservation)}


@router.delete("/{reservation_id}")
def delete_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        deleted = ReservationService(db).delete_reservation(reservation_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return {"success": True, "message": "Reservation deleted"}


@router.post("/{reservation_id}/cancel")
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        reservation = ReservationService(db).cancel_reservation(reservation_id)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if not reservation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return {
        "success": True,
        "message": "Reservation cancelled",
        "reservation": ReservationResponse.model_validate(reservation),
    }


@router.put("/{reservation_id}/swap")
def swap_reservation(
    reservation_id: int,
    data: ReservationSwap,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Move a reservation to another room or other dates"""
    try:
        reservation = ReservationService(db).swap_reservation(reservation_id, data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not reservation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return {
        "success": True,
        "message": "Reservation updated",
        "reservation": ReservationResponse.model_validate(reservation),
    }


@router.post("/{reservation_id}/check-in", status_code=status.HTTP_201_CREATED)
def check_in_reservation(
    reservation_id: int,
    data: ReservationCheckIn,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        guest = ReservationService(db).check_in(reservation_id, data, current_user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return {"success": True, "message": "Guest checked in", "guest": GuestResponse.model_validate(guest)}
