from beanie import Document, Indexed
from beanie import PydanticObjectId as OID
from pydantic import Field
from datetime import datetime, timezone

from doctors_portal.constants import PaymentState


class Payment(Document):
    """Append-only log of confirmed payments.

    A payment is inserted as RECORDED and moves to APPLIED once its booking
    has been marked paid. RECORDED rows left behind by a failed update are
    picked up by the startup recovery pass.
    """
    booking_id: Indexed(OID)
    transactionId: str
    amount: float | None = None
    state: Indexed(str) = PaymentState.RECORDED.value
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    applied_at: datetime | None = None

    class Settings:
        name = "payments"
