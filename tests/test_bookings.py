"""Booking ledger: duplicate guard, patient isolation, payment marking."""
import pytest
from beanie import PydanticObjectId

from doctors_portal.constants import PaymentState
from doctors_portal.models import Booking, Payment
from doctors_portal.schemas import BookingIn, PaymentIn
from doctors_portal.services import booking_service

CLEANING = {
    "treatment": "Cleaning",
    "date": "May 11, 2022",
    "patient": "a@x.com",
    "slot": "10:00",
}


async def test_create_then_duplicate(client):
    first = await client.post("/booking", json=CLEANING)
    assert first.status_code == 200
    assert first.json()["success"] is True
    inserted_id = first.json()["result"]["insertedId"]

    second = await client.post("/booking", json=CLEANING)
    body = second.json()
    assert body["success"] is False
    assert body["booking"]["_id"] == inserted_id
    assert body["booking"]["slot"] == "10:00"
    assert body["booking"]["paid"] is False
    assert await Booking.find_all().count() == 1


async def test_duplicate_check_ignores_slot(client):
    await client.post("/booking", json=CLEANING)
    resp = await client.post("/booking", json={**CLEANING, "slot": "11:00"})
    assert resp.json()["success"] is False
    assert resp.json()["booking"]["slot"] == "10:00"


async def test_other_patient_or_date_is_not_a_duplicate(client):
    await client.post("/booking", json=CLEANING)
    r1 = await client.post("/booking", json={**CLEANING, "patient": "b@x.com"})
    r2 = await client.post("/booking", json={**CLEANING, "date": "May 12, 2022"})
    assert r1.json()["success"] is True
    assert r2.json()["success"] is True


async def test_booking_requires_fields(client):
    resp = await client.post("/booking", json={"treatment": "Cleaning"})
    assert resp.status_code == 422
    assert resp.json()["status_code"] == 422


async def test_concurrent_duplicate_loses_on_unique_index(db, monkeypatch):
    created, winner = await booking_service.create_booking(BookingIn(**CLEANING))
    assert created

    real_find = booking_service.find_existing
    calls = {"n": 0}

    async def stale_find(**key):
        # first lookup misses, as if the other insert had not landed yet
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return await real_find(**key)

    monkeypatch.setattr(booking_service, "find_existing", stale_find)
    created, booking = await booking_service.create_booking(BookingIn(**{**CLEANING, "slot": "09:00"}))

    assert created is False
    assert booking.id == winner.id
    assert await Booking.find_all().count() == 1


async def test_patient_can_list_own_bookings(client, auth):
    await client.post("/booking", json=CLEANING)
    await client.post("/booking", json={**CLEANING, "patient": "b@x.com"})

    resp = await client.get("/booking", params={"patient": "a@x.com"}, headers=auth("a@x.com"))

    assert resp.status_code == 200
    assert [b["patient"] for b in resp.json()] == ["a@x.com"]


async def test_patient_cannot_list_other_patients_bookings(client, auth):
    await client.post("/booking", json=CLEANING)
    resp = await client.get("/booking", params={"patient": "a@x.com"}, headers=auth("f@x.com"))
    assert resp.status_code == 403


async def test_list_bookings_needs_token(client):
    resp = await client.get("/booking", params={"patient": "a@x.com"})
    assert resp.status_code == 401


async def test_get_booking_by_id(client, auth):
    created = await client.post("/booking", json=CLEANING)
    booking_id = created.json()["result"]["insertedId"]

    resp = await client.get(f"/booking/{booking_id}", headers=auth("a@x.com"))

    assert resp.status_code == 200
    assert resp.json()["_id"] == booking_id
    assert resp.json()["treatment"] == "Cleaning"


async def test_get_unknown_booking_is_null(client, auth):
    resp = await client.get("/booking/64b7f0c2a1b2c3d4e5f60718", headers=auth("a@x.com"))
    assert resp.status_code == 200
    assert resp.json() is None


async def test_get_booking_with_bad_id_is_400(client, auth):
    resp = await client.get("/booking/not-an-id", headers=auth("a@x.com"))
    assert resp.status_code == 400


async def test_mark_paid_records_payment_and_flags_booking(client, auth):
    created = await client.post("/booking", json={**CLEANING, "price": 80})
    booking_id = created.json()["result"]["insertedId"]

    resp = await client.patch(
        f"/booking/{booking_id}",
        json={"transactionId": "pi_123", "booking": booking_id},
        headers=auth("a@x.com"),
    )

    assert resp.status_code == 200
    assert resp.json() == {"$set": {"paid": True, "transactionId": "pi_123"}}

    booking = await Booking.get(PydanticObjectId(booking_id))
    assert booking.paid is True
    assert booking.transactionId == "pi_123"

    payments = await Payment.find_all().to_list()
    assert len(payments) == 1
    assert payments[0].state == PaymentState.APPLIED.value
    assert payments[0].amount == 80


async def test_mark_paid_unknown_booking_is_404_and_records_nothing(client, auth):
    resp = await client.patch(
        "/booking/64b7f0c2a1b2c3d4e5f60718",
        json={"transactionId": "pi_1"},
        headers=auth("a@x.com"),
    )
    assert resp.status_code == 404
    assert await Payment.find_all().count() == 0


async def test_mark_paid_needs_token(client):
    resp = await client.patch("/booking/64b7f0c2a1b2c3d4e5f60718", json={"transactionId": "pi_1"})
    assert resp.status_code == 401


async def test_failed_booking_update_leaves_payment_recorded_then_recovers(db, monkeypatch):
    _, booking = await booking_service.create_booking(BookingIn(**CLEANING))

    async def broken_apply(payment):
        raise RuntimeError("store went away")

    real_apply = booking_service.apply_payment
    monkeypatch.setattr(booking_service, "apply_payment", broken_apply)
    with pytest.raises(RuntimeError):
        await booking_service.mark_booking_paid(
            booking_id=str(booking.id), data=PaymentIn(transactionId="pi_9")
        )

    payment = await Payment.find_one(Payment.booking_id == booking.id)
    assert payment.state == PaymentState.RECORDED.value
    assert (await Booking.get(booking.id)).paid is False

    monkeypatch.setattr(booking_service, "apply_payment", real_apply)
    assert await booking_service.recover_recorded_payments() == 1

    assert (await Booking.get(booking.id)).transactionId == "pi_9"
    payment = await Payment.get(payment.id)
    assert payment.state == PaymentState.APPLIED.value
    assert await booking_service.recover_recorded_payments() == 0


async def test_list_bookings_without_patient_is_403(client, auth):
    resp = await client.get("/booking", headers=auth("a@x.com"))
    assert resp.status_code == 403
