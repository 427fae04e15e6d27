from beanie import Document, Indexed
from pydantic import ConfigDict, Field
from datetime import datetime, timezone


class User(Document):
    """Portal user, keyed by email.

    `role` is either "admin" or unset; it is never written from the profile upsert.
    Profile keys beyond the declared ones are stored as-is.
    """
    model_config = ConfigDict(extra="allow")

    email: Indexed(str, unique=True)
    name: str | None = None
    phone: str | None = None
    imageUrl: str | None = None
    role: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "users"
