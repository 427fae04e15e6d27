from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from datetime import datetime, timezone


class Booking(Document):
    """A patient's reservation of one slot of a treatment on a date.

    At most one booking per (treatment, date, patient); the unique index
    below is what enforces it under concurrent inserts.
    """
    treatment: str  # Service.name
    date: Indexed(str)
    patient: Indexed(str)  # patient email
    slot: str
    patientName: str | None = None
    phone: str | None = None
    price: float | None = None
    paid: bool = False
    transactionId: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "bookings"
        indexes = [
            IndexModel(
                [("treatment", ASCENDING), ("date", ASCENDING), ("patient", ASCENDING)],
                unique=True,
                name="uniq_treatment_date_patient",
            ),
        ]
