# Re-export Beanie documents
from .service import Service
from .booking import Booking
from .user import User
from .doctor import Doctor
from .payment import Payment
