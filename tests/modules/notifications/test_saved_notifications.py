"""
Unit tests for saved notifications: drafting, editing and sending.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from hackhub.core.auth import StaffUser
from hackhub.core.cache import StatsCache
from hackhub.modules.notifications import service
from hackhub.modules.notifications.models import Notification, NotificationStatus
from hackhub.modules.notifications.schemas import NotificationCreate, NotificationUpdate
from hackhub.modules.settings.schemas import EventSettingsResponse
from hackhub.modules.settings.service import EmailsDisabledError

SERVICE = "hackhub.modules.notifications.service"


def make_notification(status=NotificationStatus.DRAFT, **overrides):
    notification = MagicMock(spec=Notification)
    notification.id = uuid4()
    notification.title = "Kickoff"
    notification.subject = "Kickoff tomorrow"
    notification.message = "See you at 9:00 <sharp>."
    notification.to_emails = ["ada@example.com", "grace@example.com"]
    notification.cc_emails = ["mentors@example.com"]
    notification.status = status
    notification.sent_at = None
    notification.sent_count = 0
    notification.failed_count = 0
    notification.error_message = None
    notification.created_by = None
    for key, value in overrides.items():
        setattr(notification, key, value)
    return notification


def event_settings(enable_emails=True, from_email="events@hackhub.dev"):
    return EventSettingsResponse(
        registration_enabled=True,
        submission_enabled=True,
        submission_deadline=None,
        orientation_link=None,
        event_start_date=None,
        event_end_date=None,
        enable_emails=enable_emails,
        from_email=from_email,
    )


@pytest.fixture
def admin():
    return StaffUser(id=uuid4(), email="admin@example.com", role="admin")


@pytest.fixture
def cache():
    return StatsCache(300)


@pytest.fixture
def notification(now):
    return make_notification(created_at=now, updated_at=now)


@pytest.fixture
def stored(notification):
    with patch(
        f"{SERVICE}.repository.get_by_id", AsyncMock(return_value=notification)
    ) as mock_get:
        yield mock_get


@pytest.fixture
def emails_on():
    with patch(
        f"{SERVICE}.settings_service.get_event_settings",
        AsyncMock(return_value=event_settings()),
    ):
        yield


class TestCreateNotification:
    """Tests for create_notification."""

    @pytest.mark.asyncio
    async def test_saved_as_draft_with_normalized_addresses(self, mock_db, admin, notification):
        data = NotificationCreate(
            title="Kickoff",
            subject="Kickoff tomorrow",
            message="See you at 9:00.",
            to_emails=["Ada@Example.com", "ada@example.com", "grace@example.com"],
        )

        with patch(
            f"{SERVICE}.repository.create", AsyncMock(return_value=notification)
        ) as create:
            result = await service.create_notification(mock_db, data, admin)

        assert result is notification
        fields = create.call_args.args[1]
        assert fields["to_emails"] == ["ada@example.com", "grace@example.com"]
        assert fields["cc_emails"] == []
        assert fields["status"] == NotificationStatus.DRAFT
        assert fields["created_by"] == admin.id
        mock_db.commit.assert_awaited_once()

    def test_needs_at_least_one_recipient(self):
        with pytest.raises(ValidationError):
            NotificationCreate(title="t", subject="s", message="m", to_emails=[])


class TestUpdateNotification:
    """Tests for update_notification."""

    @pytest.mark.asyncio
    async def test_draft_is_editable(self, mock_db, notification, stored):
        result = await service.update_notification(
            mock_db, notification.id, NotificationUpdate(subject="Moved to 10:00")
        )

        assert result.subject == "Moved to 10:00"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_notification_is_editable(self, mock_db, notification, stored):
        notification.status = NotificationStatus.FAILED

        await service.update_notification(
            mock_db, notification.id, NotificationUpdate(to_emails=["Ada@Example.com"])
        )

        assert notification.to_emails == ["ada@example.com"]

    @pytest.mark.asyncio
    async def test_sent_notification_is_locked(self, mock_db, notification, stored):
        notification.status = NotificationStatus.SENT

        with pytest.raises(service.NotificationLockedError) as exc_info:
            await service.update_notification(
                mock_db, notification.id, NotificationUpdate(subject="Too late")
            )

        assert exc_info.value.status_code == 400
        assert notification.subject == "Kickoff tomorrow"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_notification(self, mock_db):
        with patch(f"{SERVICE}.repository.get_by_id", AsyncMock(return_value=None)):
            with pytest.raises(service.NotificationNotFoundError):
                await service.update_notification(mock_db, uuid4(), NotificationUpdate())


class TestDeleteNotification:
    """Tests for delete_notification."""

    @pytest.mark.asyncio
    async def test_delete(self, mock_db, notification, stored):
        with patch(f"{SERVICE}.repository.delete_notification", AsyncMock()) as delete:
            await service.delete_notification(mock_db, notification.id)

        delete.assert_awaited_once_with(mock_db, notification)
        mock_db.commit.assert_awaited_once()


class TestSendSavedNotification:
    """Tests for send_saved_notification."""

    @pytest.mark.asyncio
    async def test_all_delivered_marks_sent(
        self, mock_db, cache, notification, stored, emails_on, now
    ):
        with patch(f"{SERVICE}.send_custom_email", AsyncMock(return_value=True)) as send:
            outcome = await service.send_saved_notification(mock_db, notification.id, cache, now)

        assert send.await_count == 2
        send.assert_any_await(
            to_email="ada@example.com",
            subject="Kickoff tomorrow",
            message="See you at 9:00 <sharp>.",
            cc=["mentors@example.com"],
            from_email="events@hackhub.dev",
        )
        assert outcome.sent_count == 2
        assert outcome.failed_count == 0
        assert outcome.errors == []
        assert notification.status == NotificationStatus.SENT
        assert notification.sent_at == now
        assert notification.error_message is None
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_partial_failure_marks_failed(
        self, mock_db, cache, notification, stored, emails_on
    ):
        async def fake_send(to_email, **_kwargs):
            if to_email == "grace@example.com":
                raise RuntimeError("mailbox full")
            return True

        with patch(f"{SERVICE}.send_custom_email", side_effect=fake_send):
            outcome = await service.send_saved_notification(mock_db, notification.id, cache)

        assert (outcome.sent_count, outcome.failed_count) == (1, 1)
        assert outcome.errors == ["Failed to send to grace@example.com: mailbox full"]
        assert notification.status == NotificationStatus.FAILED
        assert notification.failed_count == 1
        assert notification.error_message == "Failed to send to grace@example.com: mailbox full"

    @pytest.mark.asyncio
    async def test_rejected_delivery_is_counted_as_failure(
        self, mock_db, cache, notification, stored, emails_on
    ):
        notification.to_emails = ["ada@example.com"]

        with patch(f"{SERVICE}.send_custom_email", AsyncMock(return_value=False)):
            outcome = await service.send_saved_notification(mock_db, notification.id, cache)

        assert outcome.failed_count == 1
        assert outcome.errors == ["Failed to send to ada@example.com: Email delivery failed"]

    @pytest.mark.asyncio
    async def test_failed_notification_can_be_resent(
        self, mock_db, cache, notification, stored, emails_on
    ):
        notification.status = NotificationStatus.FAILED

        with patch(f"{SERVICE}.send_custom_email", AsyncMock(return_value=True)):
            await service.send_saved_notification(mock_db, notification.id, cache)

        assert notification.status == NotificationStatus.SENT

    @pytest.mark.asyncio
    async def test_already_sent_is_refused(self, mock_db, cache, notification, stored):
        notification.status = NotificationStatus.SENT

        with patch(f"{SERVICE}.send_custom_email", AsyncMock()) as send:
            with pytest.raises(service.NotificationAlreadySentError):
                await service.send_saved_notification(mock_db, notification.id, cache)

        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refused_when_emails_are_disabled(self, mock_db, cache, notification, stored):
        with (
            patch(
                f"{SERVICE}.settings_service.get_event_settings",
                AsyncMock(return_value=event_settings(enable_emails=False)),
            ),
            patch(f"{SERVICE}.send_custom_email", AsyncMock()) as send,
        ):
            with pytest.raises(EmailsDisabledError):
                await service.send_saved_notification(mock_db, notification.id, cache)

        send.assert_not_awaited()
        assert notification.status == NotificationStatus.DRAFT
