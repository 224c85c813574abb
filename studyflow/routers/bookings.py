from typing import List
from fastapi import APIRouter, Depends, HTTPException
from studyflow.errors import SessionUnavailableError
from studyflow.schemas.language_class import BookingWithSession, UserBookingCreate, UserBookingOut
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import get_current_user_id

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.get("", response_model=List[BookingWithSession])
def list_bookings(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    return storage.get_user_bookings(user_id)


@router.post("", response_model=UserBookingOut, status_code=201)
def create_booking(
    booking: UserBookingCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    try:
        new = storage.create_booking(user_id, booking)
    except SessionUnavailableError:
        raise HTTPException(status_code=409, detail="Session is full or not open for booking")
    if not new:
        raise HTTPException(status_code=404, detail="Session not found")
    return new


@router.patch("/{booking_id}/cancel")
def cancel_booking(booking_id: int, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    if not storage.cancel_booking(booking_id, user_id):
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"detail": "Booking cancelled"}
