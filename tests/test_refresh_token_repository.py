"""Tests for RefreshTokenRepository."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError


def _future(days=30):
    return datetime.utcnow() + timedelta(days=days)


def _past(days=1):
    return datetime.utcnow() - timedelta(days=days)


class TestRefreshTokenRepository:

    def test_create_and_find_token(self, refresh_token_repository, test_user_id):
        created = refresh_token_repository.create_token(
            test_user_id,
            "token-a",
            _future(),
            user_agent="pytest",
            ip_address="127.0.0.1",
        )

        found = refresh_token_repository.find_by_token("token-a")
        assert found is not None
        assert found.id == created.id
        assert found.user_id == test_user_id
        assert found.user_agent == "pytest"

    def test_token_value_is_unique(self, refresh_token_repository, test_user_id, other_user_id):
        refresh_token_repository.create_token(test_user_id, "same", _future())
        with pytest.raises(IntegrityError):
            refresh_token_repository.create_token(other_user_id, "same", _future())

    def test_expired_token_is_invisible_to_lookup(self, refresh_token_repository, test_user_id):
        refresh_token_repository.create_token(test_user_id, "old", _past())

        assert refresh_token_repository.find_by_token("old") is None
        record = refresh_token_repository.find_by_token_including_expired("old")
        assert record is not None
        assert record.is_expired(datetime.utcnow())

    def test_find_user_tokens_skips_expired(self, refresh_token_repository, test_user_id):
        refresh_token_repository.create_token(test_user_id, "live-1", _future())
        refresh_token_repository.create_token(test_user_id, "live-2", _future())
        refresh_token_repository.create_token(test_user_id, "dead", _past())

        tokens = refresh_token_repository.find_user_tokens(test_user_id)
        assert sorted(t.token for t in tokens) == ["live-1", "live-2"]

    def test_invalidate_token(self, refresh_token_repository, test_user_id):
        refresh_token_repository.create_token(test_user_id, "bye", _future())

        assert refresh_token_repository.invalidate_token("bye") is True
        assert refresh_token_repository.invalidate_token("bye") is False
        assert refresh_token_repository.find_by_token("bye") is None

    def test_invalidate_all_user_tokens(self, refresh_token_repository, test_user_id, other_user_id):
        refresh_token_repository.create_token(test_user_id, "t1", _future())
        refresh_token_repository.create_token(test_user_id, "t2", _future())
        refresh_token_repository.create_token(other_user_id, "o1", _future())

        assert refresh_token_repository.invalidate_all_user_tokens(test_user_id) == 2
        assert refresh_token_repository.find_user_tokens(test_user_id) == []
        assert refresh_token_repository.find_by_token("o1") is not None

    def test_purge_expired_for_one_user(self, refresh_token_repository, test_user_id, other_user_id):
        refresh_token_repository.create_token(test_user_id, "mine-old", _past())
        refresh_token_repository.create_token(test_user_id, "mine-live", _future())
        refresh_token_repository.create_token(other_user_id, "theirs-old", _past())

        assert refresh_token_repository.purge_expired(test_user_id) == 1
        assert refresh_token_repository.find_by_token_including_expired("mine-old") is None
        assert refresh_token_repository.find_by_token_including_expired("theirs-old") is not None

        assert refresh_token_repository.purge_expired() == 1
