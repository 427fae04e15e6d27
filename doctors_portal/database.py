from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from doctors_portal.config import get_settings

settings = get_settings()

_mongo_client: AsyncIOMotorClient | None = None


async def init_db(client: AsyncIOMotorClient | None = None) -> None:
    """Open the shared MongoDB client and register Beanie document models.

    A pre-built client (e.g. mongomock's) can be passed in; otherwise one is
    created from MONGODB_URI.
    """
    global _mongo_client
    _mongo_client = client or AsyncIOMotorClient(settings.MONGODB_URI)
    from doctors_portal.models import Service, Booking, User, Doctor, Payment

    await init_beanie(
        database=_mongo_client[settings.MONGODB_DB],
        document_models=[Service, Booking, User, Doctor, Payment],
    )


def close_db() -> None:
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
    _mongo_client = None


async def ping_db() -> bool:
    """Check MongoDB connectivity."""
    if not _mongo_client:
        return False
    try:
        await _mongo_client.admin.command("ping")
        return True
    except Exception:
        return False
