"""
Transaction routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import TransactionCreate, TransactionResponse
from hoteldesk.security.auth import get_current_user
from hoteldesk.services.transaction_service import TransactionService

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.get("/get-transactions")
def get_transactions(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    transactions = TransactionService(db).get_transactions()
    return {"success": True, "data": [TransactionResponse.model_validate(t) for t in transactions]}


@router.get("")
def get_transactions_by_source(
    reservation_id: Optional[int] = Query(None, alias="reservationId"),
    guest_id: Optional[int] = Query(None, alias="guestId"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    if reservation_id is None and guest_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="reservationId or guestId is required")
    transactions = TransactionService(db).get_transactions(reservation_id=reservation_id, guest_id=guest_id)
    return {"success": True, "data": [TransactionResponse.model_validate(t) for t in transactions]}


@router.post("/add", status_code=status.HTTP_201_CREATED)
def add_transaction(
    data: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        tx = TransactionService(db).add_transaction(data, current_user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Transaction recorded", "data": TransactionResponse.model_validate(tx)}


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    if not TransactionService(db).delete_transaction(transaction_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return {"success": True, "message": "Transaction deleted"}
