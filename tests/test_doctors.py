"""Admin-only doctor directory."""
from doctors_portal.models import Doctor


async def test_admin_adds_lists_and_deletes_doctor(client, auth, admin):
    headers = auth(admin)

    added = await client.post(
        "/doctor",
        headers=headers,
        json={"name": "Dr. Rahman", "email": "rahman@clinic.com", "specialty": "Oral Surgery"},
    )
    assert added.status_code == 200
    assert added.json()["insertedId"]

    listed = await client.get("/doctor", headers=headers)
    assert [d["email"] for d in listed.json()] == ["rahman@clinic.com"]
    assert listed.json()[0]["_id"] == added.json()["insertedId"]

    deleted = await client.delete("/doctor/rahman@clinic.com", headers=headers)
    assert deleted.json()["deletedCount"] == 1
    assert await Doctor.find_all().count() == 0


async def test_delete_unknown_doctor_reports_zero(client, auth, admin):
    resp = await client.delete("/doctor/nobody@clinic.com", headers=auth(admin))
    assert resp.status_code == 200
    assert resp.json()["deletedCount"] == 0


async def test_add_doctor_validates_body(client, auth, admin):
    resp = await client.post("/doctor", headers=auth(admin), json={"specialty": "x"})
    assert resp.status_code == 422
