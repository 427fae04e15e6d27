from enum import Enum


class Role(str, Enum):
    """Access levels resolved once per request."""
    GUEST = "guest"       # no token
    PATIENT = "patient"   # authenticated, no stored role
    ADMIN = "admin"


class PaymentState(str, Enum):
    RECORDED = "recorded"   # payment stored, booking not yet marked paid
    APPLIED = "applied"     # booking marked paid
