from datetime import datetime, timezone
from typing import List, Optional, Tuple

from beanie import PydanticObjectId as OID
from beanie.operators import Set
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from doctors_portal.constants import PaymentState
from doctors_portal.models import Booking, Payment
from doctors_portal.schemas import BookingIn, PaymentIn
from doctors_portal.utils.logger import get_logger

logger = get_logger("booking")


def parse_booking_id(booking_id: str) -> OID:
    try:
        return OID(booking_id)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid booking_id")


async def find_existing(*, treatment: str, date: str, patient: str) -> Optional[Booking]:
    """The booking holding (treatment, date, patient), if any. Slot is not part of the key."""
    return await Booking.find_one(
        Booking.treatment == treatment,
        Booking.date == date,
        Booking.patient == patient,
    )


async def create_booking(data: BookingIn) -> Tuple[bool, Booking]:
    """Record a booking unless the patient already holds this treatment on this date.

    Returns (created, booking). When created is False, booking is the record
    that already exists, untouched.
    """
    key = dict(treatment=data.treatment, date=data.date, patient=data.patient)
    existing = await find_existing(**key)
    if existing:
        logger.info(f"Duplicate booking rejected: {key}")
        return False, existing

    booking = Booking(**data.model_dump())
    try:
        await booking.insert()
    except DuplicateKeyError:
        # Lost the race against a concurrent insert of the same triple
        winner = await find_existing(**key)
        if winner is None:
            raise
        logger.info(f"Duplicate booking rejected by unique index: {key}")
        return False, winner

    logger.info(f"Booking created {booking.id}: {key} slot={booking.slot}")
    return True, booking


async def list_patient_bookings(patient: str) -> List[Booking]:
    return await Booking.find(Booking.patient == patient).to_list()


async def get_booking(booking_id: str) -> Optional[Booking]:
    return await Booking.get(parse_booking_id(booking_id))


async def apply_payment(payment: Payment) -> None:
    """Second phase: mark the booking paid, then close the payment as APPLIED."""
    await Booking.find_one(Booking.id == payment.booking_id).update(
        Set({Booking.paid: True, Booking.transactionId: payment.transactionId})
    )
    payment.state = PaymentState.APPLIED.value
    payment.applied_at = datetime.now(timezone.utc)
    await payment.save()


async def mark_booking_paid(*, booking_id: str, data: PaymentIn) -> dict:
    """Record the payment, then flag the booking as paid.

    The two writes are separate. If the booking update fails the payment
    stays RECORDED and `recover_recorded_payments` finishes it later.
    """
    oid = parse_booking_id(booking_id)
    booking = await Booking.get(oid)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    payment = Payment(
        booking_id=oid,
        transactionId=data.transactionId,
        amount=data.amount if data.amount is not None else booking.price,
    )
    await payment.insert()
    logger.info(f"Payment {payment.id} recorded for booking {oid}")

    try:
        await apply_payment(payment)
    except Exception:
        logger.error(
            f"Payment {payment.id} recorded but booking {oid} not marked paid",
            exc_info=True,
        )
        raise

    logger.info(f"Booking {oid} marked paid (transaction {data.transactionId})")
    return {"$set": {"paid": True, "transactionId": data.transactionId}}


async def recover_recorded_payments() -> int:
    """Apply every payment left in RECORDED state. Returns how many were applied."""
    pending = await Payment.find(Payment.state == PaymentState.RECORDED.value).to_list()
    applied = 0
    for payment in pending:
        try:
            await apply_payment(payment)
            applied += 1
        except Exception:
            logger.error(f"Recovery failed for payment {payment.id}", exc_info=True)
    if pending:
        logger.info(f"Payment recovery: {applied}/{len(pending)} applied")
    return applied
