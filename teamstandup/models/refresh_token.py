"""Refresh token data model for teamstandup."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RefreshToken(BaseModel):
    """Server-side record of an issued refresh token."""

    id: str = Field(..., description="Unique record identifier")
    user_id: str = Field(..., description="Owning user ID")
    token: str = Field(..., description="Opaque refresh token value")
    user_agent: Optional[str] = Field(None, description="User-Agent of the client the token was issued to")
    ip_address: Optional[str] = Field(None, description="Client IP address at issue time")
    last_used_at: datetime = Field(..., description="Last time the token was used")
    expires_at: datetime = Field(..., description="Token is treated as nonexistent after this instant")
    created_at: datetime = Field(..., description="Issue timestamp")

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
