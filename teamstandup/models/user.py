"""User data model for teamstandup."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from teamstandup.models.constants import DEFAULT_TIMEZONE


class UserStatus(str, Enum):
    """User account status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(BaseModel):
    """User model (never carries the password hash)."""

    id: str = Field(..., description="Unique user identifier (UUID v4)")
    email: str = Field(..., description="Lowercased email address")
    name: str = Field(..., description="User display name")
    timezone: str = Field(DEFAULT_TIMEZONE, description="IANA timezone name, e.g. 'Pacific/Auckland'")
    profile_image: Optional[str] = Field(None, description="Profile image URL")
    status: UserStatus = Field(UserStatus.ACTIVE, description="Account status")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class UserCredentials(User):
    """User plus the stored bcrypt hash; only used for credential checks."""

    password_hash: str = Field(..., description="bcrypt hash of the user's password")
