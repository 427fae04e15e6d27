"""
Insert the default service catalog when the services collection is empty.

Usage:
    python -m doctors_portal.scripts.seed_services
"""
import asyncio

from doctors_portal.database import init_db, close_db
from doctors_portal.models import Service
from doctors_portal.utils.logger import get_logger

logger = get_logger("seed")

DAY_SLOTS = [
    "08.00 AM - 08.30 AM",
    "08.30 AM - 09.00 AM",
    "09.00 AM - 09.30 AM",
    "09.30 AM - 10.00 AM",
    "10.00 AM - 10.30 AM",
    "10.30 AM - 11.00 AM",
    "11.00 AM - 11.30 AM",
    "11.30 AM - 12.00 PM",
    "05.00 PM - 05.30 PM",
    "05.30 PM - 06.00 PM",
]

DEFAULT_SERVICES = [
    ("Teeth Orthodontics", 200),
    ("Cosmetic Dentistry", 150),
    ("Teeth Cleaning", 80),
    ("Cavity Protection", 120),
    ("Pediatric Dental", 100),
    ("Oral Surgery", 300),
]


async def seed() -> int:
    if await Service.find_all().count() > 0:
        logger.info("Services already present, nothing to seed")
        return 0
    for name, price in DEFAULT_SERVICES:
        await Service(name=name, price=price, slots=list(DAY_SLOTS)).insert()
    logger.info(f"Seeded {len(DEFAULT_SERVICES)} services")
    return len(DEFAULT_SERVICES)


async def main():
    await init_db()
    try:
        await seed()
    finally:
        close_db()


if __name__ == "__main__":
    asyncio.run(main())
