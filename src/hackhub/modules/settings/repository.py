"""
Event Settings Repository

The settings table holds at most one row. Writes are flushed and the
service commits.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.settings.models import EventSettings


async def get_settings(db: AsyncSession) -> EventSettings | None:
    result = await db.execute(select(EventSettings).order_by(EventSettings.created_at).limit(1))
    return result.scalars().first()


async def create_default(db: AsyncSession) -> EventSettings:
    row = EventSettings()
    db.add(row)
    await db.flush()
    await db.refresh(row)
    return row


def apply_updates(row: EventSettings, updates: dict[str, Any]) -> EventSettings:
    for key, value in updates.items():
        if hasattr(row, key):
            setattr(row, key, value)
    return row
