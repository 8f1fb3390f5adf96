"""Team directory and profile management."""

import logging
from typing import List

from teamstandup.database.refresh_token_repository import RefreshTokenRepository
from teamstandup.database.user_repository import UserRepository
from teamstandup.models.user import User
from teamstandup.services.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository, refresh_tokens: RefreshTokenRepository):
        self.users = users
        self.refresh_tokens = refresh_tokens

    def get_all_users(self) -> List[User]:
        """Active users only."""
        return self.users.get_active()

    def update_profile(self, user_id: str, changes: dict) -> User:
        if not changes:
            raise ValidationFailed("No profile fields supplied")
        user = self.users.update(user_id, changes)
        if not user:
            raise NotFound("User not found")
        return user

    def deactivate(self, user_id: str) -> User:
        """Soft-delete the account and sign it out everywhere."""
        user = self.users.soft_delete(user_id)
        if not user:
            raise NotFound("User not found")
        self.refresh_tokens.invalidate_all_user_tokens(user_id)
        logger.info(f"Deactivated user {user_id}")
        return user
