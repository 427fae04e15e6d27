from beanie import Document, Indexed
from pydantic import Field
from typing import List


class Service(Document):
    """A bookable treatment with its daily slot list."""
    name: Indexed(str, unique=True)
    price: float = 0
    # Same list every day; bookings narrow it per date
    slots: List[str] = Field(default_factory=list)

    class Settings:
        name = "services"
