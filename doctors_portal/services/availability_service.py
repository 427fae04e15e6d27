from typing import Iterable, List

from doctors_portal.config import get_settings
from doctors_portal.models import Booking, Service
from doctors_portal.schemas import ServiceNameOut, ServiceOut


def narrow_slots(services: Iterable[Service], bookings: Iterable[Booking]) -> List[ServiceOut]:
    """Drop booked slots from each service, keeping slot order.

    `bookings` must already be limited to a single date.
    """
    booked_by_treatment: dict[str, set[str]] = {}
    for b in bookings:
        booked_by_treatment.setdefault(b.treatment, set()).add(b.slot)

    out: List[ServiceOut] = []
    for service in services:
        booked = booked_by_treatment.get(service.name, set())
        out.append(
            ServiceOut(
                id=str(service.id),
                name=service.name,
                price=service.price,
                slots=[slot for slot in service.slots if slot not in booked],
            )
        )
    return out


async def available_services(date: str | None = None) -> List[ServiceOut]:
    """All services with their slots narrowed to what is still open on `date`."""
    date = date or get_settings().DEFAULT_AVAILABILITY_DATE
    services = await Service.find_all().to_list()
    bookings = await Booking.find(Booking.date == date).to_list()
    return narrow_slots(services, bookings)


async def list_service_names() -> List[ServiceNameOut]:
    services = await Service.find_all().to_list()
    return [ServiceNameOut(id=str(s.id), name=s.name) for s in services]
