"""Repository for server-side refresh tokens.

Security notes:
- Refresh tokens are bearer secrets: never log raw values.
- Lookups ignore expired rows; expired rows are purged when new tokens are issued.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from teamstandup.database.models import RefreshTokenDB
from teamstandup.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


class RefreshTokenRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_token(
        self,
        user_id: str,
        token: str,
        expires_at: datetime,
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> RefreshToken:
        now = datetime.utcnow()
        row = RefreshTokenDB(
            user_id=user_id,
            token=token,
            user_agent=user_agent,
            ip_address=ip_address,
            last_used_at=now,
            expires_at=expires_at,
            created_at=now,
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Stored refresh token {row.id} for user {user_id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store refresh token for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        """Find a live (unexpired) token."""
        row = (
            self.db.query(RefreshTokenDB)
            .filter(RefreshTokenDB.token == token, RefreshTokenDB.expires_at > datetime.utcnow())
            .first()
        )
        return row.to_pydantic() if row else None

    def find_by_token_including_expired(self, token: str) -> Optional[RefreshToken]:
        row = self.db.query(RefreshTokenDB).filter(RefreshTokenDB.token == token).first()
        return row.to_pydantic() if row else None

    def find_user_tokens(self, user_id: str) -> List[RefreshToken]:
        """All live tokens of a user, newest first."""
        rows = (
            self.db.query(RefreshTokenDB)
            .filter(RefreshTokenDB.user_id == user_id, RefreshTokenDB.expires_at > datetime.utcnow())
            .order_by(RefreshTokenDB.created_at.desc())
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def invalidate_token(self, token: str) -> bool:
        """Delete a token. Returns True if a row was deleted."""
        try:
            affected = (
                self.db.query(RefreshTokenDB)
                .filter(RefreshTokenDB.token == token)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            return affected > 0
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete refresh token: {type(e).__name__}: {str(e)}")
            raise

    def invalidate_all_user_tokens(self, user_id: str) -> int:
        """Delete every token of a user. Returns number of rows deleted."""
        try:
            affected = (
                self.db.query(RefreshTokenDB)
                .filter(RefreshTokenDB.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            logger.debug(f"Deleted {affected} refresh tokens for user {user_id}")
            return int(affected)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete refresh tokens for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def purge_expired(self, user_id: Optional[str] = None) -> int:
        """Delete expired tokens (optionally for one user only)."""
        query = self.db.query(RefreshTokenDB).filter(RefreshTokenDB.expires_at <= datetime.utcnow())
        if user_id is not None:
            query = query.filter(RefreshTokenDB.user_id == user_id)
        try:
            affected = query.delete(synchronize_session=False)
            self.db.commit()
            if affected:
                logger.debug(f"Purged {affected} expired refresh tokens")
            return int(affected)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to purge expired refresh tokens: {type(e).__name__}: {str(e)}")
            raise
