"""Data models for teamstandup."""

from teamstandup.models.user import User, UserCredentials, UserStatus
from teamstandup.models.refresh_token import RefreshToken
from teamstandup.models.standup import (
    Pagination,
    Standup,
    StandupCreate,
    StandupOwner,
    StandupPage,
    StandupQuery,
    StandupStatus,
    StandupUpdate,
)

__all__ = [
    "User",
    "UserCredentials",
    "UserStatus",
    "RefreshToken",
    "Pagination",
    "Standup",
    "StandupCreate",
    "StandupOwner",
    "StandupPage",
    "StandupQuery",
    "StandupStatus",
    "StandupUpdate",
]
