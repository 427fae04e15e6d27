from fastapi import APIRouter, Depends, Request
from typing import List

from doctors_portal.config import get_settings
from doctors_portal.rate_limit import limiter
from doctors_portal.schemas import (
    AdminStatusOut,
    Principal,
    UpdateResult,
    UserOut,
    UserUpsertIn,
    UserUpsertOut,
)
from doctors_portal.security import get_current_principal, require_admin
from doctors_portal.services import user_service

settings = get_settings()

router = APIRouter(tags=["users"])


@router.get("/user", response_model=List[UserOut])
async def route_list_users(current: Principal = Depends(get_current_principal)):
    users = await user_service.list_users()
    return [UserOut.from_doc(u) for u in users]


@router.get("/admin/{email}", response_model=AdminStatusOut)
async def route_check_admin(email: str):
    """Public: lets clients show or hide admin UI."""
    return AdminStatusOut(admin=await user_service.is_admin(email))


@router.put("/user/admin/{email}", response_model=UpdateResult)
async def route_make_admin(email: str, current: Principal = Depends(require_admin)):
    return await user_service.promote_to_admin(email)


@router.put("/user/{email}", response_model=UserUpsertOut)
@limiter.limit(settings.WRITE_RATE_LIMIT)
async def route_upsert_user(request: Request, email: str, payload: UserUpsertIn):
    """Create/update the user's profile and hand back a 1-hour access token."""
    result, token = await user_service.upsert_user(email=email, profile=payload)
    return UserUpsertOut(result=result, token=token)
