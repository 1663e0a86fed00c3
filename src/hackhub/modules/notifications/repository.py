"""
Notification Repository

Database operations for saved notifications. Writes are flushed and the
service commits.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.notifications.models import Notification


async def list_notifications(db: AsyncSession) -> list[Notification]:
    """All saved notifications, newest first."""
    result = await db.execute(select(Notification).order_by(Notification.created_at.desc()))
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, notification_id: UUID) -> Notification | None:
    return await db.get(Notification, notification_id)


async def create(db: AsyncSession, fields: dict[str, Any]) -> Notification:
    notification = Notification(**fields)
    db.add(notification)
    await db.flush()
    await db.refresh(notification)
    return notification


def apply_updates(notification: Notification, updates: dict[str, Any]) -> Notification:
    for key, value in updates.items():
        if hasattr(notification, key):
            setattr(notification, key, value)
    return notification


async def delete_notification(db: AsyncSession, notification: Notification) -> None:
    await db.delete(notification)
    await db.flush()
