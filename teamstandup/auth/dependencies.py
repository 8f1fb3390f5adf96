"""FastAPI dependencies for authentication."""

from typing import Optional
from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from teamstandup.auth.jwt import decode_access_token
from teamstandup.models.constants import ACCESS_COOKIE_NAME

# HTTP Bearer token security scheme (cookie is preferred; header is for non-browser clients)
security = HTTPBearer(auto_error=False)


class AuthIdentity(BaseModel):
    """Identity resolved once at the HTTP boundary and passed to services explicitly."""
    user_id: str
    email: str


def get_current_identity(
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthIdentity:
    """Resolve the caller from the access token cookie or Authorization header.

    Only the token is verified here; whether the user still exists is the
    concern of the service being called.

    Raises:
        HTTPException: 401 if no token is present or it is invalid/expired
    """
    token = access_token or (credentials.credentials if credentials else None)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthIdentity(user_id=payload["userId"], email=payload.get("email", ""))
