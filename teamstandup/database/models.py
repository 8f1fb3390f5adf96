"""SQLAlchemy database models for teamstandup."""

from datetime import datetime
from typing import Type, TypeVar, Union
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from teamstandup.database.database import Base
from teamstandup.models.constants import DEFAULT_BLOCKERS, DEFAULT_TIMEZONE
from teamstandup.models.standup import StandupStatus
from teamstandup.models.user import UserStatus

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Credentials (email is always stored lowercase)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)

    # Profile
    name = Column(String, nullable=False)
    timezone = Column(String, nullable=False, default=DEFAULT_TIMEZONE)
    profile_image = Column(String, nullable=True)
    status = Column(String, nullable=False, default=UserStatus.ACTIVE.value, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model (without password hash)."""
        from teamstandup.models.user import User
        return User(**self._profile_fields())

    def to_credentials(self):
        """Convert database model to Pydantic model including the password hash."""
        from teamstandup.models.user import UserCredentials
        return UserCredentials(**self._profile_fields(), password_hash=self.password_hash)

    def to_owner(self):
        """Minimal owner summary used when joining users onto standups."""
        from teamstandup.models.standup import StandupOwner
        return StandupOwner(
            id=self.id,
            name=self.name,
            email=self.email,
            profile_image=self.profile_image,
        )

    def _profile_fields(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "timezone": self.timezone,
            "profile_image": self.profile_image,
            "status": value_to_enum(self.status, UserStatus, UserStatus.ACTIVE),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class RefreshTokenDB(Base):
    """Server-side record of an issued refresh token.

    The raw token is a bearer secret; never log it.
    """

    __tablename__ = "refresh_tokens"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    token = Column(String, nullable=False, unique=True, index=True)
    user_agent = Column(String, nullable=True)
    ip_address = Column(String, nullable=True)

    last_used_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from teamstandup.models.refresh_token import RefreshToken
        return RefreshToken(
            id=self.id,
            user_id=self.user_id,
            token=self.token,
            user_agent=self.user_agent,
            ip_address=self.ip_address,
            last_used_at=self.last_used_at,
            expires_at=self.expires_at,
            created_at=self.created_at,
        )


class StandupDB(Base):
    """Database model for Standup."""

    __tablename__ = "standups"
    __table_args__ = (
        # One standup per user per (UTC) calendar day; the per-day upsert relies on it.
        UniqueConstraint("user_id", "date", name="uq_standup_user_date"),
        Index("ix_standups_date_created_at", "date", "created_at"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)

    yesterday = Column(Text, nullable=False)
    today = Column(Text, nullable=False)
    blockers = Column(Text, nullable=True, default=DEFAULT_BLOCKERS)
    status = Column(String, nullable=False, default=StandupStatus.DRAFT.value, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB")

    def to_pydantic(self, include_owner: bool = False):
        """Convert database model to Pydantic model."""
        from teamstandup.models.standup import Standup
        return Standup(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            yesterday=self.yesterday,
            today=self.today,
            blockers=self.blockers,
            status=value_to_enum(self.status, StandupStatus, StandupStatus.DRAFT),
            created_at=self.created_at,
            updated_at=self.updated_at,
            user=self.user.to_owner() if include_owner and self.user is not None else None,
        )
