"""
Unit tests for the applicant session manager.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from hackhub.core.security import hash_token
from hackhub.modules.applicant_auth.sessions import (
    create_session,
    destroy_session,
    validate_session,
)


class FakeSessionStore:
    """In-memory stand-in for the session half of the applicant_auth repository."""

    def __init__(self):
        self.sessions = {}

    async def create_session(self, db, *, applicant_id, token_hash, expires_at, now):
        session = SimpleNamespace(
            id=uuid4(),
            applicant_id=applicant_id,
            token_hash=token_hash,
            expires_at=expires_at,
            last_activity=now,
        )
        self.sessions[token_hash] = session
        return session

    async def get_session_by_token_hash(self, db, token_hash):
        return self.sessions.get(token_hash)

    async def touch_session(self, db, session_id, now):
        for session in self.sessions.values():
            if session.id == session_id:
                session.last_activity = now

    async def delete_session_by_token_hash(self, db, token_hash):
        return 1 if self.sessions.pop(token_hash, None) else 0


@pytest.fixture
def store():
    return FakeSessionStore()


@pytest.fixture
def session_env(store, applicant):
    with (
        patch("hackhub.modules.applicant_auth.sessions.repository", store),
        patch(
            "hackhub.modules.applicant_auth.sessions.applicant_repository"
        ) as mock_applicants,
    ):
        mock_applicants.get_by_id = AsyncMock(return_value=applicant)
        yield mock_applicants


class TestCreateSession:
    """Tests for create_session."""

    @pytest.mark.asyncio
    async def test_token_is_stored_hashed(self, mock_db, store, session_env, applicant, now):
        token = await create_session(mock_db, applicant.id, now)

        [stored] = store.sessions.values()
        assert stored.token_hash == hash_token(token)
        assert token not in store.sessions
        assert stored.expires_at == now + timedelta(hours=24)
        assert stored.last_activity == now

    @pytest.mark.asyncio
    async def test_tokens_are_unique_and_long(self, mock_db, session_env, applicant, now):
        tokens = {await create_session(mock_db, applicant.id, now) for _ in range(20)}

        assert len(tokens) == 20
        # 32 random bytes, urlsafe base64 without padding
        assert all(len(t) >= 43 for t in tokens)

    @pytest.mark.asyncio
    async def test_does_not_commit(self, mock_db, session_env, applicant, now):
        """The caller commits the session together with the consumed OTP."""
        await create_session(mock_db, applicant.id, now)

        mock_db.commit.assert_not_called()


class TestValidateSession:
    """Tests for validate_session."""

    @pytest.mark.asyncio
    async def test_valid_one_second_before_expiry(
        self, mock_db, session_env, applicant, now
    ):
        token = await create_session(mock_db, applicant.id, now)

        result = await validate_session(mock_db, token, now + timedelta(hours=24, seconds=-1))

        assert result is applicant

    @pytest.mark.asyncio
    async def test_invalid_at_and_after_expiry(self, mock_db, session_env, applicant, now):
        token = await create_session(mock_db, applicant.id, now)

        assert await validate_session(mock_db, token, now + timedelta(hours=24)) is None
        assert await validate_session(mock_db, token, now + timedelta(hours=24, seconds=1)) is None

    @pytest.mark.asyncio
    async def test_activity_is_recorded_without_extending_expiry(
        self, mock_db, store, session_env, applicant, now
    ):
        token = await create_session(mock_db, applicant.id, now)
        later = now + timedelta(hours=23)

        await validate_session(mock_db, token, later)

        [stored] = store.sessions.values()
        assert stored.last_activity == later
        assert stored.expires_at == now + timedelta(hours=24)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
    async def test_missing_or_unknown_token(self, mock_db, session_env, token):
        assert await validate_session(mock_db, token) is None

    @pytest.mark.asyncio
    async def test_deleted_applicant(self, mock_db, session_env, applicant, now):
        token = await create_session(mock_db, applicant.id, now)
        session_env.get_by_id.return_value = None

        assert await validate_session(mock_db, token, now) is None


class TestDestroySession:
    """Tests for destroy_session."""

    @pytest.mark.asyncio
    async def test_logout_invalidates_token(self, mock_db, session_env, applicant, now):
        token = await create_session(mock_db, applicant.id, now)

        await destroy_session(mock_db, token)

        assert await validate_session(mock_db, token, now) is None

    @pytest.mark.asyncio
    async def test_is_idempotent(self, mock_db, session_env, applicant, now):
        token = await create_session(mock_db, applicant.id, now)

        await destroy_session(mock_db, token)
        await destroy_session(mock_db, token)
        await destroy_session(mock_db, None)
