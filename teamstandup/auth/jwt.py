"""JWT token generation and validation for teamstandup."""

import os
import secrets
import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict
from dotenv import load_dotenv

load_dotenv()

# JWT configuration
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "change-me-refresh-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))
JWT_REFRESH_EXPIRATION_DAYS = int(os.getenv("JWT_REFRESH_EXPIRATION_DAYS", "30"))

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def create_access_token(user_id: str, email: str) -> str:
    """Create a JWT access token for a user.

    Args:
        user_id: User ID to encode in token
        email: User email to encode in token

    Returns:
        Encoded JWT token string
    """
    now = datetime.utcnow()
    payload = {
        "userId": user_id,
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_refresh_token() -> str:
    """Create a signed refresh token.

    The token carries no identity; the server-side record maps it to a user.
    ``jti`` keeps tokens minted in the same second distinct.
    """
    now = datetime.utcnow()
    payload = {
        "type": REFRESH_TOKEN_TYPE,
        "jti": secrets.token_urlsafe(16),
        "exp": now + timedelta(days=JWT_REFRESH_EXPIRATION_DAYS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_REFRESH_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict]:
    """Decode and validate a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload (dict with 'userId' and 'email'), or None if invalid
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != ACCESS_TOKEN_TYPE or not payload.get("userId"):
        return None
    return payload


def decode_refresh_token(token: str) -> Optional[Dict]:
    """Verify a refresh token's signature and expiry; None if invalid."""
    try:
        payload = jwt.decode(token, JWT_REFRESH_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        return None
    return payload


def get_user_id_from_token(token: str) -> Optional[str]:
    """Extract user ID from a JWT access token.

    Args:
        token: JWT token string

    Returns:
        User ID string, or None if token is invalid
    """
    payload = decode_access_token(token)
    if payload:
        return payload.get("userId")
    return None
