"""
Event Settings Service

Reads and writes the single event settings row. Reads go through the
shared cache under ``EVENT_SETTINGS_KEY``; every write drops that key.
The row is created with defaults the first time it is read.

The email switch gates staff-initiated mail (test emails and saved
notifications). Login codes and registration mail are sent regardless.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core import email
from hackhub.core.cache import EVENT_SETTINGS_KEY, StatsCache
from hackhub.core.errors import InvalidRequestError, UpstreamFailureError
from hackhub.modules.settings import repository
from hackhub.modules.settings.models import EventSettings
from hackhub.modules.settings.schemas import (
    EmailSettingsResponse,
    EmailSettingsUpdate,
    EventSettingsResponse,
    EventSettingsUpdate,
)

logger = logging.getLogger(__name__)

# Fields an update may clear by sending null
NULLABLE_FIELDS = frozenset(
    {
        "submission_deadline",
        "orientation_link",
        "event_start_date",
        "event_end_date",
        "from_email",
    }
)


class EmailsDisabledError(InvalidRequestError):
    def __init__(self):
        super().__init__(message="Email service is disabled", error_code="EMAILS_DISABLED")


class SendTestEmailFailedError(UpstreamFailureError):
    def __init__(self):
        super().__init__(message="Failed to send test email", error_code="TEST_EMAIL_FAILED")


class InvalidEventWindowError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="event_end_date must be after event_start_date",
            error_code="INVALID_EVENT_WINDOW",
        )


async def _get_or_create(db: AsyncSession) -> EventSettings:
    row = await repository.get_settings(db)
    if row is None:
        row = await repository.create_default(db)
        await db.commit()
        logger.info(f"Created default event settings {row.id}")
    return row


async def get_event_settings(db: AsyncSession, cache: StatsCache) -> EventSettingsResponse:
    async def load() -> EventSettingsResponse:
        return EventSettingsResponse.model_validate(await _get_or_create(db))

    return await cache.get_or_load(EVENT_SETTINGS_KEY, load)


async def _apply(
    db: AsyncSession,
    updates: dict[str, Any],
    cache: StatsCache,
) -> EventSettingsResponse:
    updates = {k: v for k, v in updates.items() if v is not None or k in NULLABLE_FIELDS}
    row = await _get_or_create(db)

    start = updates.get("event_start_date", row.event_start_date)
    end = updates.get("event_end_date", row.event_end_date)
    if start is not None and end is not None and end <= start:
        raise InvalidEventWindowError()

    repository.apply_updates(row, updates)
    await db.commit()
    await db.refresh(row)
    cache.invalidate(EVENT_SETTINGS_KEY)

    logger.info(f"Updated event settings: {sorted(updates)}")
    return EventSettingsResponse.model_validate(row)


async def update_event_settings(
    db: AsyncSession,
    data: EventSettingsUpdate,
    cache: StatsCache,
) -> EventSettingsResponse:
    """
    Apply a partial update to the event settings.

    Null clears optional fields and is ignored for switches.

    Raises:
        InvalidEventWindowError: The merged event dates would end before they start
    """
    return await _apply(db, data.model_dump(exclude_unset=True), cache)


async def get_email_settings(db: AsyncSession, cache: StatsCache) -> EmailSettingsResponse:
    current = await get_event_settings(db, cache)
    return EmailSettingsResponse(enable_emails=current.enable_emails, from_email=current.from_email)


async def update_email_settings(
    db: AsyncSession,
    data: EmailSettingsUpdate,
    cache: StatsCache,
) -> EmailSettingsResponse:
    updated = await _apply(db, data.model_dump(exclude_unset=True), cache)
    return EmailSettingsResponse(enable_emails=updated.enable_emails, from_email=updated.from_email)


async def require_emails_enabled(db: AsyncSession, cache: StatsCache) -> EventSettingsResponse:
    """
    Return the current settings, or refuse when staff email is switched off.

    Raises:
        EmailsDisabledError: ``enable_emails`` is false
    """
    current = await get_event_settings(db, cache)
    if not current.enable_emails:
        raise EmailsDisabledError()
    return current


async def send_test_email(db: AsyncSession, cache: StatsCache, to_email: str) -> str:
    """
    Send a test email using the configured sender.

    Raises:
        EmailsDisabledError: Email is switched off
        SendTestEmailFailedError: The provider rejected the message
    """
    current = await require_emails_enabled(db, cache)

    if not await email.send_test_email(to_email, from_email=current.from_email):
        raise SendTestEmailFailedError()

    logger.info(f"Test email sent to {to_email}")
    return f"Test email sent to {to_email}"
