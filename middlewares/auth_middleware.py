import uuid

import jwt
from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config.database import get_db
from helpers.token_helper import decode_access_token
from api.admin.admin_service import get_admin_by_id

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def auth_middleware(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
):
    token = credentials.credentials
    try:
        decoded = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        # expired token → 401
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        # any other decode error → 401
        raise _unauthorized("Invalid token")

    try:
        admin_id = uuid.UUID(str(decoded.get("adminId")))
    except ValueError:
        # token was structurally OK but payload missing
        raise _unauthorized("Invalid token payload")

    admin = get_admin_by_id(db, admin_id)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found"
        )
    if not admin.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin not verified"
        )
    return admin
