from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List, Optional

from doctors_portal.config import get_settings
from doctors_portal.rate_limit import limiter
from doctors_portal.schemas import (
    BookingCreateOut,
    BookingIn,
    BookingOut,
    InsertResult,
    PaymentIn,
    Principal,
)
from doctors_portal.security import get_current_principal
from doctors_portal.services import booking_service

settings = get_settings()

router = APIRouter(prefix="/booking", tags=["booking"])


@router.get("", response_model=List[BookingOut])
async def route_patient_bookings(
    patient: Optional[str] = None,
    current: Principal = Depends(get_current_principal),
):
    """Bookings of `patient`; callers may only read their own (no patient is a mismatch too)."""
    if patient != current.email:
        raise HTTPException(status_code=403, detail="forbidden access")
    bookings = await booking_service.list_patient_bookings(patient)
    return [BookingOut.from_doc(b) for b in bookings]


@router.get("/{booking_id}", response_model=Optional[BookingOut])
async def route_get_booking(booking_id: str, current: Principal = Depends(get_current_principal)):
    booking = await booking_service.get_booking(booking_id)
    return BookingOut.from_doc(booking) if booking else None


@router.post("", response_model=BookingCreateOut, response_model_exclude_none=True)
@limiter.limit(settings.WRITE_RATE_LIMIT)
async def route_create_booking(request: Request, payload: BookingIn):
    created, booking = await booking_service.create_booking(payload)
    if not created:
        return BookingCreateOut(success=False, booking=BookingOut.from_doc(booking))
    return BookingCreateOut(success=True, result=InsertResult(insertedId=str(booking.id)))


@router.patch("/{booking_id}")
async def route_mark_paid(
    booking_id: str,
    payload: PaymentIn,
    current: Principal = Depends(get_current_principal),
):
    """Record a confirmed payment and flag the booking paid. Echoes the applied update."""
    return await booking_service.mark_booking_paid(booking_id=booking_id, data=payload)
