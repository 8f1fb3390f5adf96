"""Authentication service: registration, login, and the refresh token lifecycle.

Each refresh token moves one way: active -> (consumed by refresh | deleted by
logout | expired) -> gone. A token is never accepted again after leaving the
active state.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel

from teamstandup.auth.jwt import create_access_token, create_refresh_token, decode_refresh_token
from teamstandup.auth.passwords import hash_password, verify_password
from teamstandup.database.refresh_token_repository import RefreshTokenRepository
from teamstandup.database.user_repository import UserRepository
from teamstandup.models.constants import REFRESH_TOKEN_TTL_DAYS
from teamstandup.models.user import User, UserStatus
from teamstandup.services.errors import Conflict, NotFound, Unauthorized

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class AuthResult(TokenPair):
    user: User


class AuthService:
    """Orchestrates users, refresh tokens, the token signer and the password hasher."""

    def __init__(self, users: UserRepository, refresh_tokens: RefreshTokenRepository):
        self.users = users
        self.refresh_tokens = refresh_tokens

    def _issue_tokens(
        self,
        user: User,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> TokenPair:
        """Sign a new access/refresh pair and persist the refresh token."""
        self.refresh_tokens.purge_expired(user.id)

        access_token = create_access_token(user.id, user.email)
        refresh_token = create_refresh_token()
        self.refresh_tokens.create_token(
            user.id,
            refresh_token,
            datetime.utcnow() + timedelta(days=REFRESH_TOKEN_TTL_DAYS),
            user_agent=user_agent,
            ip_address=ip_address,
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def register(
        self,
        email: str,
        password: str,
        name: str,
        timezone: Optional[str] = None,
        profile_image: Optional[str] = None,
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        if self.users.get_by_email(email):
            raise Conflict("User already exists")

        user = self.users.create(
            email=email,
            password_hash=hash_password(password),
            name=name,
            timezone=timezone,
            profile_image=profile_image,
        )
        tokens = self._issue_tokens(user, user_agent, ip_address)
        logger.info(f"Registered user {user.id}")
        return AuthResult(user=user, **tokens.model_dump())

    def login(
        self,
        email: str,
        password: str,
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """Authenticate by email and password.

        Unknown email, wrong password and inactive account all fail with the
        same 401 so callers cannot tell which check failed.
        """
        credentials = self.users.get_by_email_with_password(email)
        if not credentials:
            raise Unauthorized(INVALID_CREDENTIALS)
        if not verify_password(password, credentials.password_hash):
            logger.warning(f"Failed login for user {credentials.id}")
            raise Unauthorized(INVALID_CREDENTIALS)
        if credentials.status != UserStatus.ACTIVE.value:
            logger.warning(f"Login attempt for inactive user {credentials.id}")
            raise Unauthorized(INVALID_CREDENTIALS)

        user = User(**credentials.model_dump(exclude={"password_hash"}))
        tokens = self._issue_tokens(user, user_agent, ip_address)
        return AuthResult(user=user, **tokens.model_dump())

    def logout(self, refresh_token: Optional[str]) -> None:
        """Revoke a refresh token. Unknown or missing tokens are not an error."""
        if refresh_token:
            self.refresh_tokens.invalidate_token(refresh_token)

    def refresh_token(
        self,
        old_refresh_token: Optional[str],
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> TokenPair:
        """Exchange a live refresh token for a new pair, revoking the old token."""
        if not old_refresh_token:
            raise Unauthorized("Invalid refresh token")

        record = self.refresh_tokens.find_by_token_including_expired(old_refresh_token)
        if not record:
            raise Unauthorized("Invalid refresh token")

        if record.is_expired(datetime.utcnow()) or decode_refresh_token(old_refresh_token) is None:
            self.refresh_tokens.invalidate_token(old_refresh_token)
            raise Unauthorized("Refresh token expired")

        user = self.users.get(record.user_id)
        if not user:
            raise NotFound("User not found")

        tokens = self._issue_tokens(user, user_agent, ip_address)
        self.refresh_tokens.invalidate_token(old_refresh_token)
        logger.info(f"Rotated refresh token for user {user.id}")
        return tokens

    def logout_all(self, user_id: str) -> int:
        """Revoke every refresh token of a user (global sign-out)."""
        count = self.refresh_tokens.invalidate_all_user_tokens(user_id)
        logger.info(f"Revoked {count} refresh tokens for user {user_id}")
        return count

    def get_current_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise NotFound("User not found")
        return user
