"""Repository for User database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from teamstandup.models.user import User, UserCredentials, UserStatus
from teamstandup.database.models import UserDB

logger = logging.getLogger(__name__)

# Fields a profile update may touch; everything else is immutable through update().
UPDATABLE_FIELDS = ("name", "timezone", "profile_image", "status")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        timezone: Optional[str] = None,
        profile_image: Optional[str] = None,
    ) -> User:
        """Create a new user.

        Args:
            email: Email address (lowercased before storage)
            password_hash: bcrypt hash; the plaintext never reaches this layer
            name: Display name
            timezone: Optional IANA timezone name (column default applies if None)
            profile_image: Optional profile image URL

        Returns:
            Created User object (without password hash)
        """
        user_db = UserDB(
            email=normalize_email(email),
            password_hash=password_hash,
            name=name,
            profile_image=profile_image,
        )
        if timezone:
            user_db.timezone = timezone
        try:
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user_db.id}: {user_db.email}")
            return user_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user {normalize_email(email)}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        user_db = self.db.query(UserDB).filter(UserDB.email == normalize_email(email)).first()
        return user_db.to_pydantic() if user_db else None

    def get_by_email_with_password(self, email: str) -> Optional[UserCredentials]:
        """Get user by email including the password hash (for login only)."""
        user_db = self.db.query(UserDB).filter(UserDB.email == normalize_email(email)).first()
        return user_db.to_credentials() if user_db else None

    def get_active(self) -> List[User]:
        """Get all active users sorted by name."""
        users_db = (
            self.db.query(UserDB)
            .filter(UserDB.status == UserStatus.ACTIVE.value)
            .order_by(UserDB.name)
            .all()
        )
        return [user_db.to_pydantic() for user_db in users_db]

    def update(self, user_id: str, changes: dict) -> Optional[User]:
        """Apply whitelisted profile changes; returns None if the user does not exist."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        if not user_db:
            return None

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "status":
                value = value.value if hasattr(value, "value") else value
            setattr(user_db, field, value)
        user_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Updated user {user_id}")
            return user_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def soft_delete(self, user_id: str) -> Optional[User]:
        """Mark a user inactive (users are never hard-deleted)."""
        return self.update(user_id, {"status": UserStatus.INACTIVE})
