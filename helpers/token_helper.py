import jwt
import datetime
from typing import Any, Dict, Optional

from config.settings import settings  # must define JWT_SECRET and ALGORITHM
from api.admin.admin_model import Admin


def create_access_token(
    payload: Dict[str, Any],
    expires_delta: Optional[datetime.timedelta] = None,
) -> str:
    """
    Generate a JWT access token with the given payload and expiration.
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    if expires_delta is None:
        expires_delta = datetime.timedelta(hours=settings.JWT_EXPIRE_HOURS)
    to_encode = payload.copy()
    to_encode.update({"iat": now, "exp": now + expires_delta})

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def create_admin_token(
    admin: Admin,
    expires_hours: Optional[int] = None,
) -> str:
    """
    Generate a session JWT for an Admin, embedding:
      - adminId
      - email
      - exp / iat (handled by create_access_token)
    """
    token_payload: Dict[str, Any] = {
        "adminId": str(admin.id),
        "email":   admin.email,
    }
    hours = expires_hours or settings.JWT_EXPIRE_HOURS
    return create_access_token(token_payload, datetime.timedelta(hours=hours))


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; PyJWT errors propagate to the caller."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
