"""
Unit tests for jury account management.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from hackhub.core.auth import StaffUser
from hackhub.core.security import verify_password
from hackhub.modules.users import service
from hackhub.modules.users.models import User, UserRole
from hackhub.modules.users.schemas import JuryCreate, JuryUpdate

REPOSITORY = "hackhub.modules.users.service.UserRepository"


@pytest.fixture
def admin():
    return StaffUser(id=uuid4(), email="admin@example.com", role="admin")


@pytest.fixture
def jury_create():
    return JuryCreate(
        email="judge@example.com",
        password="s3cret-pass",
        first_name="Grace",
        last_name="Hopper",
    )


def make_user(role=UserRole.JURY, **overrides):
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = "judge@example.com"
    user.first_name = "Grace"
    user.last_name = "Hopper"
    user.role = role
    user.is_active = True
    for key, value in overrides.items():
        setattr(user, key, value)
    return user


class TestCreateJuryMember:
    """Tests for create_jury_member."""

    @pytest.mark.asyncio
    async def test_creates_jury_role_with_hashed_password(self, mock_db, admin, jury_create):
        created = make_user()

        with (
            patch(f"{REPOSITORY}.get_by_email", AsyncMock(return_value=None)),
            patch(f"{REPOSITORY}.create", AsyncMock(return_value=created)) as create,
        ):
            result = await service.create_jury_member(mock_db, jury_create, admin)

        assert result is created
        kwargs = create.call_args.kwargs
        assert kwargs["role"] == UserRole.JURY
        assert kwargs["password_hash"] != "s3cret-pass"
        assert verify_password("s3cret-pass", kwargs["password_hash"])
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_email_is_a_conflict(self, mock_db, admin, jury_create):
        with (
            patch(f"{REPOSITORY}.get_by_email", AsyncMock(return_value=make_user())),
            patch(f"{REPOSITORY}.create", AsyncMock()) as create,
        ):
            with pytest.raises(service.DuplicateStaffEmailError) as exc_info:
                await service.create_jury_member(mock_db, jury_create, admin)

        assert exc_info.value.status_code == 409
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unique_index_race_is_a_conflict(self, mock_db, admin, jury_create):
        with (
            patch(f"{REPOSITORY}.get_by_email", AsyncMock(return_value=None)),
            patch(
                f"{REPOSITORY}.create",
                AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("duplicate"))),
            ),
        ):
            with pytest.raises(service.DuplicateStaffEmailError):
                await service.create_jury_member(mock_db, jury_create, admin)

        mock_db.rollback.assert_awaited_once()

    def test_short_password_is_rejected(self):
        with pytest.raises(ValidationError):
            JuryCreate(email="judge@example.com", password="short", first_name="G", last_name="H")


class TestUpdateJuryMember:
    """Tests for update_jury_member."""

    @pytest.mark.asyncio
    async def test_deactivate(self, mock_db, admin):
        user = make_user()

        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=user)):
            result = await service.update_jury_member(
                mock_db, user.id, JuryUpdate(is_active=False), admin
            )

        assert result.is_active is False
        assert result.first_name == "Grace"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_admin_accounts_are_not_managed_here(self, mock_db, admin):
        other_admin = make_user(role=UserRole.ADMIN)

        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=other_admin)):
            with pytest.raises(service.JuryMemberNotFoundError):
                await service.update_jury_member(
                    mock_db, other_admin.id, JuryUpdate(is_active=False), admin
                )

        assert other_admin.is_active is True
        mock_db.commit.assert_not_awaited()


class TestListJury:
    """Tests for list_jury."""

    @pytest.mark.asyncio
    async def test_lists_jury_role_only(self, mock_db):
        with patch(f"{REPOSITORY}.list_by_role", AsyncMock(return_value=[])) as list_by_role:
            await service.list_jury(mock_db)

        list_by_role.assert_awaited_once_with(mock_db, UserRole.JURY)
