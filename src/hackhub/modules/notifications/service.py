"""
Saved Notification Service

Drafts, edits and sends admin-authored notifications.

A notification can be edited and sent while it is a draft or after a
failed send. Once every recipient has been reached it is ``sent`` and
becomes read-only.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser
from hackhub.core.cache import StatsCache
from hackhub.core.email import send_custom_email
from hackhub.core.errors import InvalidRequestError, NotFoundError
from hackhub.modules.notifications import repository
from hackhub.modules.notifications.models import Notification, NotificationStatus
from hackhub.modules.notifications.schemas import (
    NotificationCreate,
    NotificationUpdate,
    SavedNotificationResponse,
    SendOutcome,
)
from hackhub.modules.settings import service as settings_service

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("to_emails", "cc_emails")


class NotificationNotFoundError(NotFoundError):
    def __init__(self, notification_id: UUID):
        super().__init__(
            message=f"Notification {notification_id} not found",
            error_code="NOTIFICATION_NOT_FOUND",
        )


class NotificationAlreadySentError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Notification has already been sent",
            error_code="NOTIFICATION_ALREADY_SENT",
        )


class NotificationLockedError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Cannot edit a notification that has already been sent",
            error_code="NOTIFICATION_LOCKED",
        )


def _addresses(emails: Iterable[str]) -> list[str]:
    """Lowercase and drop repeats, keeping first-seen order."""
    return list(dict.fromkeys(str(e).lower() for e in emails))


async def list_notifications(db: AsyncSession) -> list[Notification]:
    return await repository.list_notifications(db)


async def get_notification(db: AsyncSession, notification_id: UUID) -> Notification:
    notification = await repository.get_by_id(db, notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return notification


async def create_notification(
    db: AsyncSession,
    data: NotificationCreate,
    staff: StaffUser,
) -> Notification:
    fields = data.model_dump(exclude=set(ADDRESS_FIELDS))
    for key in ADDRESS_FIELDS:
        fields[key] = _addresses(getattr(data, key))
    fields["status"] = NotificationStatus.DRAFT
    fields["created_by"] = staff.id

    notification = await repository.create(db, fields)
    await db.commit()

    logger.info(
        f"Notification {notification.id} drafted by {staff.email} "
        f"for {len(fields['to_emails'])} recipients"
    )
    return notification


async def update_notification(
    db: AsyncSession,
    notification_id: UUID,
    data: NotificationUpdate,
) -> Notification:
    """
    Apply a partial update to an unsent notification.

    Raises:
        NotificationNotFoundError: Unknown notification
        NotificationLockedError: The notification was already sent
    """
    notification = await get_notification(db, notification_id)
    if notification.status == NotificationStatus.SENT:
        raise NotificationLockedError()

    updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    for key in ADDRESS_FIELDS:
        if key in updates:
            updates[key] = _addresses(updates[key])

    repository.apply_updates(notification, updates)
    await db.commit()
    await db.refresh(notification)

    logger.info(f"Updated notification {notification_id}: {sorted(updates)}")
    return notification


async def delete_notification(db: AsyncSession, notification_id: UUID) -> None:
    notification = await get_notification(db, notification_id)
    await repository.delete_notification(db, notification)
    await db.commit()

    logger.info(f"Deleted notification {notification_id}")


async def send_saved_notification(
    db: AsyncSession,
    notification_id: UUID,
    cache: StatsCache,
    now: datetime | None = None,
) -> SendOutcome:
    """
    Email a saved notification to each of its recipients.

    Every address gets its own message with the same CC list. Delivery
    failures are counted rather than raised; the notification ends up
    ``sent`` only when none failed.

    Raises:
        NotificationNotFoundError: Unknown notification
        NotificationAlreadySentError: Already delivered to every recipient
        EmailsDisabledError: Email is switched off in the event settings
    """
    notification = await get_notification(db, notification_id)
    if notification.status == NotificationStatus.SENT:
        raise NotificationAlreadySentError()

    event_settings = await settings_service.require_emails_enabled(db, cache)

    sent_count = 0
    errors: list[str] = []
    for address in notification.to_emails:
        try:
            delivered = await send_custom_email(
                to_email=address,
                subject=notification.subject,
                message=notification.message,
                cc=notification.cc_emails or None,
                from_email=event_settings.from_email,
            )
            reason = None if delivered else "Email delivery failed"
        except Exception as e:
            logger.error(f"Failed to send notification {notification_id} to {address}: {e}")
            reason = str(e)

        if reason is None:
            sent_count += 1
        else:
            errors.append(f"Failed to send to {address}: {reason}")

    failed_count = len(errors)
    repository.apply_updates(
        notification,
        {
            "status": NotificationStatus.SENT if failed_count == 0 else NotificationStatus.FAILED,
            "sent_at": now or datetime.now(UTC),
            "sent_count": sent_count,
            "failed_count": failed_count,
            "error_message": "; ".join(errors) or None,
        },
    )
    await db.commit()
    await db.refresh(notification)

    logger.info(f"Notification {notification_id} sent: {sent_count} delivered, {failed_count} failed")
    return SendOutcome(
        message=f"Notification sent. Sent: {sent_count}, Failed: {failed_count}",
        sent_count=sent_count,
        failed_count=failed_count,
        errors=errors,
        notification=SavedNotificationResponse.model_validate(notification),
    )
