"""Standup business rules above the raw repository."""

import logging

from teamstandup.database.standup_repository import StandupRepository
from teamstandup.models.standup import (
    Standup,
    StandupCreate,
    StandupPage,
    StandupQuery,
    StandupUpdate,
    utc_today,
)
from teamstandup.services.errors import Conflict, InternalError, NotFound

logger = logging.getLogger(__name__)


class StandupService:
    def __init__(self, standups: StandupRepository):
        self.standups = standups

    def create_standup(self, user_id: str, data: StandupCreate) -> Standup:
        """Create the user's standup for ``data.date`` (default: today, UTC).

        A second create for the same user and day is a Conflict. The write
        itself is the repository's atomic per-day upsert, so two creates that
        race past the existence check still leave a single row.
        """
        day = data.date or utc_today()
        if self.standups.find_one(user_id, day):
            raise Conflict("Standup already exists for this date")

        fields = data.model_dump(exclude={"date"}, exclude_none=True)
        standup = self.standups.create_or_update_draft(user_id, day, fields)
        logger.info(f"Created standup {standup.id} for user {user_id} on {day}")
        return standup

    def update_standup(self, standup_id: str, user_id: str, data: StandupUpdate) -> Standup:
        """Partially update a standup owned by ``user_id``.

        A standup that exists but belongs to someone else is reported as not found.
        """
        if not self.standups.get_for_user(user_id, standup_id):
            raise NotFound("Standup not found")

        updated = self.standups.update_standup(user_id, standup_id, data.changes())
        if updated is None:
            raise InternalError("Failed to update standup")
        return updated

    def get_standups(self, query: StandupQuery) -> StandupPage:
        """List standups.

        With no user or date filter this is the team view: everyone's
        standups for today (UTC). A user filter alone gives that user's history.
        """
        if not query.has_scope():
            query = query.model_copy(update={"date": utc_today()})
        return self.standups.find_standups(query)

    def get_standup(self, standup_id: str) -> Standup:
        standup = self.standups.get(standup_id)
        if not standup:
            raise NotFound("Standup not found")
        return standup
