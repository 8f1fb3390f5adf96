"""Auth cookie handling."""

import os
from fastapi import Response
from dotenv import load_dotenv

from teamstandup.models.constants import (
    ACCESS_COOKIE_MAX_AGE,
    ACCESS_COOKIE_NAME,
    REFRESH_COOKIE_MAX_AGE,
    REFRESH_COOKIE_NAME,
)

load_dotenv()


def is_production() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    """Set httpOnly access/refresh cookies (Secure only in production)."""
    secure = is_production()
    response.set_cookie(
        ACCESS_COOKIE_NAME,
        access_token,
        max_age=ACCESS_COOKIE_MAX_AGE,
        httponly=True,
        secure=secure,
        samesite="none",
    )
    response.set_cookie(
        REFRESH_COOKIE_NAME,
        refresh_token,
        max_age=REFRESH_COOKIE_MAX_AGE,
        httponly=True,
        secure=secure,
        samesite="none",
    )


def clear_auth_cookies(response: Response) -> None:
    secure = is_production()
    for name in (ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME):
        response.delete_cookie(name, httponly=True, secure=secure, samesite="none")
