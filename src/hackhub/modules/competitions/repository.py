"""
Competition Round Repository

Database operations for competition rounds. Writes are flushed and the
service commits.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.competitions.models import CompetitionRound


async def list_rounds(db: AsyncSession) -> list[CompetitionRound]:
    """All rounds ordered by start time (unscheduled last), then name."""
    result = await db.execute(
        select(CompetitionRound).order_by(
            CompetitionRound.start_time.asc().nulls_last(),
            CompetitionRound.name,
        )
    )
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, round_id: UUID) -> CompetitionRound | None:
    return await db.get(CompetitionRound, round_id)


async def create(db: AsyncSession, fields: dict[str, Any]) -> CompetitionRound:
    round_ = CompetitionRound(**fields)
    db.add(round_)
    await db.flush()
    await db.refresh(round_)
    return round_


def apply_updates(round_: CompetitionRound, updates: dict[str, Any]) -> CompetitionRound:
    for key, value in updates.items():
        if hasattr(round_, key):
            setattr(round_, key, value)
    return round_


async def delete_round(db: AsyncSession, round_: CompetitionRound) -> None:
    """Delete a round; its stage submissions cascade at the database level."""
    await db.delete(round_)
    await db.flush()
