"""Repository for Standup database operations.

Owns the translation of list filters into SQL predicates/pagination and the
one-standup-per-user-per-day upsert.
"""

import logging
import math
import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import asc, desc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload

from teamstandup.database.models import StandupDB, enum_to_value
from teamstandup.models.constants import DEFAULT_BLOCKERS
from teamstandup.models.standup import Pagination, Standup, StandupPage, StandupQuery, StandupStatus

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": StandupDB.date,
    "createdAt": StandupDB.created_at,
    "updatedAt": StandupDB.updated_at,
}

# Content fields a partial update may touch.
UPDATABLE_FIELDS = ("yesterday", "today", "blockers", "status")


class StandupRepository:
    """Repository for Standup database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Atomic standup upsert is not supported on dialect {dialect!r}")

    def get(self, standup_id: str) -> Optional[Standup]:
        """Get a standup by ID (any owner), with the owner summary."""
        standup_db = (
            self.db.query(StandupDB)
            .options(joinedload(StandupDB.user))
            .filter(StandupDB.id == standup_id)
            .first()
        )
        return standup_db.to_pydantic(include_owner=True) if standup_db else None

    def get_for_user(self, user_id: str, standup_id: str) -> Optional[Standup]:
        """Get a standup by ID only if it is owned by the given user."""
        standup_db = self.db.query(StandupDB).filter(
            StandupDB.id == standup_id,
            StandupDB.user_id == user_id,
        ).first()
        return standup_db.to_pydantic() if standup_db else None

    def find_one(self, user_id: str, day: date) -> Optional[Standup]:
        """Get the user's standup for a calendar day."""
        standup_db = self.db.query(StandupDB).filter(
            StandupDB.user_id == user_id,
            StandupDB.date == day,
        ).first()
        return standup_db.to_pydantic() if standup_db else None

    def find_standups(self, query: StandupQuery) -> StandupPage:
        """Run a filtered, sorted, paginated standup query.

        ``date`` selects a single day and takes precedence over ``date_from`` /
        ``date_to``, which bound an inclusive range when given.
        """
        base = self.db.query(StandupDB)

        if query.user_id:
            base = base.filter(StandupDB.user_id == query.user_id)
        if query.status:
            base = base.filter(StandupDB.status == enum_to_value(query.status))

        if query.date:
            base = base.filter(StandupDB.date == query.date)
        else:
            if query.date_from:
                base = base.filter(StandupDB.date >= query.date_from)
            if query.date_to:
                base = base.filter(StandupDB.date <= query.date_to)

        total = base.count()

        direction = asc if query.order == "asc" else desc
        rows = (
            base.options(joinedload(StandupDB.user))
            .order_by(direction(SORT_COLUMNS[query.sort]), direction(StandupDB.created_at), StandupDB.id)
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
            .all()
        )

        total_pages = math.ceil(total / query.limit)
        return StandupPage(
            data=[row.to_pydantic(include_owner=True) for row in rows],
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=total_pages,
                has_more=query.page < total_pages,
            ),
        )

    def create_or_update_draft(self, user_id: str, day: date, fields: dict) -> Standup:
        """Atomically insert the user's standup for ``day`` or overwrite the existing one.

        Executed as a single INSERT ... ON CONFLICT (user_id, date) DO UPDATE so
        that concurrent writers for the same user and day end up with one row.
        The existing row keeps its id and created_at.
        """
        now = datetime.utcnow()
        values = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "date": day,
            "yesterday": fields["yesterday"],
            "today": fields["today"],
            "blockers": fields.get("blockers") or DEFAULT_BLOCKERS,
            "status": enum_to_value(fields.get("status") or StandupStatus.DRAFT),
            "created_at": now,
            "updated_at": now,
        }

        insert = self._insert_for_dialect()
        stmt = insert(StandupDB).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={
                "yesterday": stmt.excluded.yesterday,
                "today": stmt.excluded.today,
                "blockers": stmt.excluded.blockers,
                "status": stmt.excluded.status,
                "updated_at": stmt.excluded.updated_at,
            },
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to upsert standup for user {user_id} on {day}: {type(e).__name__}: {str(e)}")
            raise

        standup_db = (
            self.db.query(StandupDB)
            .populate_existing()
            .filter(StandupDB.user_id == user_id, StandupDB.date == day)
            .one()
        )
        logger.debug(f"Upserted standup {standup_db.id} for user {user_id} on {day}")
        return standup_db.to_pydantic()

    def update_standup(self, user_id: str, standup_id: str, changes: dict) -> Optional[Standup]:
        """Apply a partial update to a standup owned by ``user_id``.

        Returns None if no such standup exists for that user.
        """
        standup_db = self.db.query(StandupDB).filter(
            StandupDB.id == standup_id,
            StandupDB.user_id == user_id,
        ).first()
        if not standup_db:
            return None

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "status":
                value = enum_to_value(value)
            setattr(standup_db, field, value)
        standup_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(standup_db)
            logger.debug(f"Updated standup {standup_id}")
            return standup_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update standup {standup_id}: {type(e).__name__}: {str(e)}")
            raise
