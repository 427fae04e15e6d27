import os
import tempfile

# Settings are cached on first import, so the environment must be set first
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="doctors_portal_logs_"))
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from doctors_portal.database import init_db
from doctors_portal.main import app
from doctors_portal.models import Service, User
from doctors_portal.security import create_access_token


@pytest.fixture
async def db():
    """Fresh in-memory Mongo with Beanie registered, per test."""
    mongo = AsyncMongoMockClient()
    await init_db(mongo)
    yield mongo


@pytest.fixture
async def client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def auth_header(email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(email)}"}


@pytest.fixture
def auth():
    """auth("a@x.com") -> headers carrying a valid token for that email."""
    return auth_header


@pytest.fixture
async def admin(db):
    """An admin user; returns its email."""
    await User(email="admin@clinic.com", name="Admin", role="admin").insert()
    return "admin@clinic.com"


@pytest.fixture
async def services(db):
    cleaning = Service(name="Cleaning", price=80, slots=["09:00", "10:00", "11:00"])
    surgery = Service(name="Oral Surgery", price=300, slots=["14:00", "15:00"])
    await cleaning.insert()
    await surgery.insert()
    return [cleaning, surgery]
