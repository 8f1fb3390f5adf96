"""Request models for authentication and profile endpoints."""

from typing import Optional
from pydantic import EmailStr, Field

from teamstandup.api.responses import ApiModel
from teamstandup.models.constants import MAX_NAME_LENGTH, MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH


class RegisterRequest(ApiModel):
    """Request model for user registration."""
    email: EmailStr = Field(..., description="Email address (case-insensitive)")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(..., min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)
    timezone: Optional[str] = Field(None, description="IANA timezone name")
    profile_image: Optional[str] = Field(None, description="Profile image URL")


class LoginRequest(ApiModel):
    """Request model for email/password login."""
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class UpdateProfileRequest(ApiModel):
    """Request model for a partial profile update."""
    name: Optional[str] = Field(None, min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)
    timezone: Optional[str] = None
    profile_image: Optional[str] = None
