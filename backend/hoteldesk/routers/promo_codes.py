"""
Promo code routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import PromoCodeCreate, PromoStatusUpdate, PromoCodeResponse
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.promo_code_service import PromoCodeService

router = APIRouter(prefix="/api/promocodes", tags=["Promo codes"])


@router.get("/all")
def get_all_promo_codes(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    promos = PromoCodeService(db).get_promo_codes()
    return {"success": True, "data": [PromoCodeResponse.model_validate(p) for p in promos]}


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_promo_code(
    data: PromoCodeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    try:
        promo = PromoCodeService(db).create_promo_code(data, current_user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"success": True, "message": "Promo code created", "data": PromoCodeResponse.model_validate(promo)}


@router.put("/status/{promo_id}")
def update_promo_status(
    promo_id: int,
    data: PromoStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    promo = PromoCodeService(db).update_status(promo_id, data.status)
    if not promo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promo code not found")
    return {"success": True, "message": "Promo code updated", "data": PromoCodeResponse.model_validate(promo)}


@router.get("/validate/{code}")
def validate_promo_code(
    code: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Check a code at the desk; 400 names the reason it cannot be used"""
    try:
        promo = PromoCodeService(db).validate(code)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "data": PromoCodeResponse.model_validate(promo)}
