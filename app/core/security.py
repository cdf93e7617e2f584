import logging
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def decode_access_token(token: str, settings: Settings) -> str:
    """
    Verify a Supabase-issued access token and return its subject (the user id).
    Raises JWTError when the token is invalid, expired or has no subject.
    """
    if not settings.SUPABASE_JWT_SECRET:
        raise JWTError("SUPABASE_JWT_SECRET is not configured")
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Token has no subject")
    return str(sub)


def get_current_user_id(request: Request, settings: Settings = Depends(get_settings)) -> str:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        token = auth.replace("Bearer ", "").strip()
        try:
            return decode_access_token(token, settings)
        except JWTError as e:
            logger.warning("[auth] Rejected bearer token: %s", e)
            raise credentials_exception

    user_id: Optional[str] = request.headers.get("x-user-id")
    if user_id and settings.ALLOW_USER_ID_HEADER:
        return user_id
    raise credentials_exception
