"""
Room routes
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from hoteldesk.database import get_db
from hoteldesk.models.ontology import Employee
from hoteldesk.models.schemas import RoomCreate, RoomUpdate, RoomResponse, RoomBooking
from hoteldesk.security.auth import get_current_user, require_admin
from hoteldesk.services.errors import ConflictError
from hoteldesk.services.room_service import RoomService

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


def _rooms(rooms):
    return [RoomResponse.model_validate(r) for r in rooms]


@router.get("/get-all-rooms")
def get_all_rooms(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    return {"success": True, "rooms": _rooms(RoomService(db).get_rooms())}


@router.get("/get-available-rooms")
def get_available_rooms(
    checkin: Optional[date] = Query(None),
    checkout: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Rooms free for [checkin, checkout), or rooms currently available"""
    try:
        rooms = RoomService(db).get_available_rooms(checkin, checkout)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "rooms": _rooms(rooms)}


@router.get("/get-presidential-rooms")
def get_presidential_rooms(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    return {"success": True, "rooms": _rooms(RoomService(db).get_presidential_rooms())}


@router.get("/get-by-id/{room_id}")
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    room = RoomService(db).get_room(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return {"success": True, "room": RoomResponse.model_validate(room)}


@router.post("/create-room", status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    try:
        room = RoomService(db).create_room(data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"success": True, "message": "Room created", "room": RoomResponse.model_validate(room)}


@router.put("/update-room/{room_id}")
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    service = RoomService(db)
    if not service.get_room(room_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    try:
        room = service.update_room(room_id, data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Room updated", "room": RoomResponse.model_validate(room)}


@router.delete("/delete-room/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    try:
        deleted = RoomService(db).delete_room(room_id)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return {"success": True, "message": "Room deleted"}


@router.get("/{room_id}/timeline")
def get_room_timeline(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Current stays and upcoming reservations of a room"""
    timeline = RoomService(db).get_timeline(room_id)
    if timeline is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return {"success": True, "timeline": [RoomBooking.model_validate(e) for e in timeline]}
