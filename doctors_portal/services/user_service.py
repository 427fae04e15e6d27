from datetime import datetime, timezone
from typing import List, Tuple

from doctors_portal.constants import Role
from doctors_portal.models import User
from doctors_portal.schemas import UpdateResult, UserUpsertIn
from doctors_portal.security import create_access_token
from doctors_portal.utils.logger import get_logger

logger = get_logger("users")

# Never taken from a client profile
PROTECTED_FIELDS = {"_id", "id", "email", "role", "created_at", "updated_at", "revision_id"}


async def upsert_user(*, email: str, profile: UserUpsertIn) -> Tuple[UpdateResult, str]:
    """Create or update the profile stored under `email` and issue a fresh token.

    Only the keys present in the request body are written, including keys
    the model does not declare. Identity and role keys are dropped.
    """
    fields = {
        k: v for k, v in profile.model_dump(exclude_unset=True).items()
        if k not in PROTECTED_FIELDS
    }
    user = await User.find_one(User.email == email)

    if user is None:
        user = User(email=email, **fields)
        await user.insert()
        logger.info(f"User created: {email}")
        result = UpdateResult(matchedCount=0, modifiedCount=0, upsertedId=str(user.id))
    else:
        changed = {k: v for k, v in fields.items() if getattr(user, k, None) != v}
        if changed:
            for k, v in changed.items():
                setattr(user, k, v)
            user.updated_at = datetime.now(timezone.utc)
            await user.save()
        result = UpdateResult(matchedCount=1, modifiedCount=1 if changed else 0)

    return result, create_access_token(email)


async def promote_to_admin(email: str) -> UpdateResult:
    """Set role=admin on `email`. Promoting an admin again matches but modifies nothing."""
    user = await User.find_one(User.email == email)
    if user is None:
        return UpdateResult(matchedCount=0, modifiedCount=0)
    if user.role == Role.ADMIN.value:
        return UpdateResult(matchedCount=1, modifiedCount=0)

    user.role = Role.ADMIN.value
    user.updated_at = datetime.now(timezone.utc)
    await user.save()
    logger.info(f"User promoted to admin: {email}")
    return UpdateResult(matchedCount=1, modifiedCount=1)


async def is_admin(email: str) -> bool:
    user = await User.find_one(User.email == email)
    return user is not None and user.role == Role.ADMIN.value


async def list_users() -> List[User]:
    return await User.find_all().to_list()
