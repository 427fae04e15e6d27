from pydantic import BaseModel, Field
from typing import Optional, List

from doctors_portal.constants import Role

# -------------------- Identity --------------------


class Principal(BaseModel):
    """Caller identity decoded from the bearer token."""
    email: str
    role: Role = Role.PATIENT


# -------------------- Store write results --------------------
# Same shape the Mongo drivers report back, so existing clients keep working.


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int = 0
    modifiedCount: int = 0
    upsertedId: Optional[str] = None


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deletedCount: int = 0


# -------------------- Service Schemas --------------------


class ServiceNameOut(BaseModel):
    id: str = Field(alias="_id")
    name: str

    class Config:
        populate_by_name = True


class ServiceOut(ServiceNameOut):
    price: float = 0
    slots: List[str] = []


# -------------------- Booking Schemas --------------------


class BookingIn(BaseModel):
    treatment: str = Field(min_length=1)
    date: str = Field(min_length=1)
    patient: str = Field(min_length=1, description="patient email")
    slot: str = Field(min_length=1)
    patientName: Optional[str] = None
    phone: Optional[str] = None
    price: Optional[float] = None


class BookingOut(BookingIn):
    id: str = Field(alias="_id")
    paid: bool = False
    transactionId: Optional[str] = None

    class Config:
        populate_by_name = True

    @classmethod
    def from_doc(cls, b) -> "BookingOut":
        return cls(
            id=str(b.id),
            treatment=b.treatment,
            date=b.date,
            patient=b.patient,
            slot=b.slot,
            patientName=b.patientName,
            phone=b.phone,
            price=b.price,
            paid=b.paid,
            transactionId=b.transactionId,
        )


class BookingCreateOut(BaseModel):
    """success=False carries the booking that already holds the triple."""
    success: bool
    booking: Optional[BookingOut] = None
    result: Optional[InsertResult] = None


class PaymentIn(BaseModel):
    transactionId: str = Field(min_length=1)
    amount: Optional[float] = None
    booking: Optional[str] = None  # booking id echoed by the client, informational


# -------------------- User Schemas --------------------


class UserUpsertIn(BaseModel):
    """Profile a client may write. Any extra key is kept; protected ones are
    stripped by the user service."""
    name: Optional[str] = None
    phone: Optional[str] = None
    imageUrl: Optional[str] = None

    class Config:
        extra = "allow"


class UserOut(BaseModel):
    id: str = Field(alias="_id")
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    imageUrl: Optional[str] = None
    role: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @classmethod
    def from_doc(cls, u) -> "UserOut":
        return cls(
            id=str(u.id),
            email=u.email,
            name=u.name,
            phone=u.phone,
            imageUrl=u.imageUrl,
            role=u.role,
            **(u.model_extra or {}),
        )


class UserUpsertOut(BaseModel):
    result: UpdateResult
    token: str


class AdminStatusOut(BaseModel):
    admin: bool


# -------------------- Doctor Schemas --------------------


class DoctorIn(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    specialty: Optional[str] = None
    img: Optional[str] = None


class DoctorOut(DoctorIn):
    id: str = Field(alias="_id")

    class Config:
        populate_by_name = True


# -------------------- Payment Schemas --------------------


class PaymentIntentIn(BaseModel):
    price: float = Field(gt=0)


class PaymentIntentOut(BaseModel):
    clientSecret: str
