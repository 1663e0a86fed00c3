"""
Unit tests for event settings, email settings and the test email.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from hackhub.core.cache import EVENT_SETTINGS_KEY, StatsCache
from hackhub.modules.settings import service
from hackhub.modules.settings.models import EventSettings
from hackhub.modules.settings.schemas import (
    EmailSettingsUpdate,
    EventSettingsUpdate,
)

SERVICE = "hackhub.modules.settings.service"


def make_settings_row(**overrides):
    row = MagicMock(spec=EventSettings)
    row.registration_enabled = True
    row.submission_enabled = True
    row.submission_deadline = None
    row.orientation_link = None
    row.event_start_date = None
    row.event_end_date = None
    row.enable_emails = True
    row.from_email = None
    for key, value in overrides.items():
        setattr(row, key, value)
    return row


@pytest.fixture
def cache():
    return StatsCache(300)


@pytest.fixture
def row():
    return make_settings_row()


@pytest.fixture
def stored(row):
    with patch(f"{SERVICE}.repository.get_settings", AsyncMock(return_value=row)) as mock_get:
        yield mock_get


class TestGetEventSettings:
    """Tests for get_event_settings."""

    @pytest.mark.asyncio
    async def test_defaults_are_created_on_first_read(self, mock_db, cache, row):
        with (
            patch(f"{SERVICE}.repository.get_settings", AsyncMock(return_value=None)),
            patch(f"{SERVICE}.repository.create_default", AsyncMock(return_value=row)) as create,
        ):
            result = await service.get_event_settings(mock_db, cache)

        assert result.registration_enabled is True
        assert result.enable_emails is True
        create.assert_awaited_once()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_second_read_is_served_from_cache(self, mock_db, cache, stored):
        first = await service.get_event_settings(mock_db, cache)
        second = await service.get_event_settings(mock_db, cache)

        assert first == second
        stored.assert_awaited_once()


class TestUpdateEventSettings:
    """Tests for update_event_settings."""

    @pytest.mark.asyncio
    async def test_update_drops_cached_row(self, mock_db, cache, row, stored):
        await service.get_event_settings(mock_db, cache)

        result = await service.update_event_settings(
            mock_db, EventSettingsUpdate(orientation_link="https://meet.example.com/kickoff"), cache
        )

        assert result.orientation_link == "https://meet.example.com/kickoff"
        assert row.orientation_link == "https://meet.example.com/kickoff"
        assert cache.get(EVENT_SETTINGS_KEY) is None
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_null_clears_optional_fields_but_not_switches(self, mock_db, cache, stored):
        stored.return_value = make_settings_row(orientation_link="https://old.example.com")

        result = await service.update_event_settings(
            mock_db,
            EventSettingsUpdate(orientation_link=None, registration_enabled=None),
            cache,
        )

        assert result.orientation_link is None
        assert result.registration_enabled is True

    @pytest.mark.asyncio
    async def test_end_before_stored_start_is_rejected(self, mock_db, cache, stored, now):
        stored.return_value = make_settings_row(event_start_date=now)

        with pytest.raises(service.InvalidEventWindowError):
            await service.update_event_settings(
                mock_db, EventSettingsUpdate(event_end_date=now - timedelta(days=1)), cache
            )

        mock_db.commit.assert_not_awaited()

    def test_naive_dates_are_rejected(self):
        with pytest.raises(ValidationError):
            EventSettingsUpdate(event_start_date="2026-04-01T09:00:00")

    def test_window_is_checked_when_both_dates_are_sent(self, now):
        with pytest.raises(ValidationError):
            EventSettingsUpdate(event_start_date=now, event_end_date=now)


class TestEmailSettings:
    """Tests for the email settings view of the settings row."""

    @pytest.mark.asyncio
    async def test_get_returns_only_email_fields(self, mock_db, cache, stored):
        stored.return_value = make_settings_row(from_email="events@hackhub.dev")

        result = await service.get_email_settings(mock_db, cache)

        assert result.model_dump() == {"enable_emails": True, "from_email": "events@hackhub.dev"}

    @pytest.mark.asyncio
    async def test_switching_emails_off(self, mock_db, cache, row, stored):
        result = await service.update_email_settings(
            mock_db, EmailSettingsUpdate(enable_emails=False), cache
        )

        assert result.enable_emails is False
        assert row.enable_emails is False

    def test_sender_must_be_an_email(self):
        with pytest.raises(ValidationError):
            EmailSettingsUpdate(from_email="not-an-address")


class TestSendTestEmail:
    """Tests for send_test_email."""

    @pytest.mark.asyncio
    async def test_refused_when_emails_are_disabled(self, mock_db, cache, stored):
        stored.return_value = make_settings_row(enable_emails=False)

        with patch(f"{SERVICE}.email.send_test_email", AsyncMock()) as send:
            with pytest.raises(service.EmailsDisabledError) as exc_info:
                await service.send_test_email(mock_db, cache, "admin@example.com")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Email service is disabled"
        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_configured_sender(self, mock_db, cache, stored):
        stored.return_value = make_settings_row(from_email="events@hackhub.dev")

        with patch(f"{SERVICE}.email.send_test_email", AsyncMock(return_value=True)) as send:
            message = await service.send_test_email(mock_db, cache, "admin@example.com")

        assert message == "Test email sent to admin@example.com"
        send.assert_awaited_once_with("admin@example.com", from_email="events@hackhub.dev")

    @pytest.mark.asyncio
    async def test_provider_failure_is_upstream_error(self, mock_db, cache, stored):
        with patch(f"{SERVICE}.email.send_test_email", AsyncMock(return_value=False)):
            with pytest.raises(service.SendTestEmailFailedError) as exc_info:
                await service.send_test_email(mock_db, cache, "admin@example.com")

        assert exc_info.value.status_code == 500
