"""
Unit tests for staff authentication dependencies.
"""

from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from hackhub.core.auth import StaffUser, get_current_staff_user, require_roles
from hackhub.core.security import create_access_token, create_refresh_token
from hackhub.modules.users.models import UserRole


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentStaffUser:
    """Tests for get_current_staff_user."""

    @pytest.mark.asyncio
    async def test_valid_access_token(self):
        user_id = uuid4()
        token = create_access_token(str(user_id), {"email": "a@example.com", "role": "admin"})

        staff = await get_current_staff_user(_bearer(token))

        assert staff.id == user_id
        assert staff.role == "admin"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_staff_user(None)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_accepted(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_staff_user(_bearer(create_refresh_token(str(uuid4()))))

        assert exc_info.value.detail["error"] == "INVALID_TOKEN_TYPE"


class TestRequireRoles:
    """Tests for the role dependency factory."""

    @pytest.fixture
    def jury(self):
        return StaffUser(id=uuid4(), email="j@example.com", role="jury")

    @pytest.mark.asyncio
    async def test_allowed_role_passes(self, jury):
        dependency = require_roles(UserRole.ADMIN, UserRole.JURY)

        assert await dependency(staff=jury) is jury

    @pytest.mark.asyncio
    async def test_other_role_is_forbidden(self, jury):
        dependency = require_roles(UserRole.ADMIN)

        with pytest.raises(HTTPException) as exc_info:
            await dependency(staff=jury)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "INSUFFICIENT_ROLE"

    @pytest.mark.asyncio
    async def test_plain_string_roles(self, jury):
        assert await require_roles("jury")(staff=jury) is jury
