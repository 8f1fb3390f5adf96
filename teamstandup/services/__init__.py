"""Service layer for teamstandup."""

from teamstandup.services.auth_service import AuthResult, AuthService, TokenPair
from teamstandup.services.standup_service import StandupService
from teamstandup.services.user_service import UserService

__all__ = [
    "AuthResult",
    "AuthService",
    "TokenPair",
    "StandupService",
    "UserService",
]
