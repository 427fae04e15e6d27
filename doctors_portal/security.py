from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from jose import jwt, JWTError

from doctors_portal.config import get_settings
from doctors_portal.constants import Role
from doctors_portal.models import User
from doctors_portal.schemas import Principal
from doctors_portal.utils.logger import get_logger

settings = get_settings()
logger = get_logger("security")

# Raw header: only a missing header is 401, anything malformed goes to the 403 path
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


# ------------------------ JWT helpers ------------------------


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token bound to `email` (1 hour by default)."""
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)
    expire = issued_at + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": email, "email": email, "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and verify a token; invalid or expired tokens are 403."""
    try:
        return jwt.decode(
            token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden access",
        )


# ------------------------ Guards ------------------------


async def get_current_principal(
    authorization: Optional[str] = Depends(authorization_header),
) -> Principal:
    """Auth guard: require a bearer token and return the identity it carries."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
            headers={"WWW-Authenticate": "Bearer"},
        )
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    payload = decode_token(token)
    email = payload.get("email") or payload.get("sub")
    if not email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden access")
    return Principal(email=email, role=Role.PATIENT)


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Admin guard: the caller's stored user record must carry role=admin."""
    account = await User.find_one(User.email == principal.email)
    if account is None or account.role != Role.ADMIN.value:
        logger.warning(f"Admin route refused for {principal.email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
    return Principal(email=principal.email, role=Role.ADMIN)
