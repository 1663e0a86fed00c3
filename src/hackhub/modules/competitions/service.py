"""
Competition Round Service

Round CRUD for admins, round listing for applicants and the public, and
the document checklist derived from a round's requirements.

Every write drops the admin statistics cache, since per-stage counts and
round listings are part of it.
"""

import logging
from pathlib import PurePosixPath
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.cache import StatsCache
from hackhub.core.errors import InvalidRequestError, NotFoundError
from hackhub.modules.competitions import repository
from hackhub.modules.competitions.models import CompetitionRound
from hackhub.modules.competitions.schemas import (
    RoundCreate,
    RoundUpdate,
    StageDocument,
)

logger = logging.getLogger(__name__)


class RoundNotFoundError(NotFoundError):
    def __init__(self, round_id: UUID | None = None):
        message = f"Round {round_id} not found" if round_id else "Round not found"
        super().__init__(message=message, error_code="ROUND_NOT_FOUND")


class InvalidRoundWindowError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="end_time must be after start_time",
            error_code="INVALID_ROUND_WINDOW",
        )


def _requirements_payload(requirements: list[Any] | None) -> list[dict] | None:
    if requirements is None:
        return None
    return [r.model_dump() for r in requirements]


async def list_rounds(db: AsyncSession) -> list[CompetitionRound]:
    return await repository.list_rounds(db)


async def get_round(db: AsyncSession, round_id: UUID) -> CompetitionRound:
    round_ = await repository.get_by_id(db, round_id)
    if round_ is None:
        raise RoundNotFoundError(round_id)
    return round_


async def create_round(
    db: AsyncSession,
    data: RoundCreate,
    cache: StatsCache,
) -> CompetitionRound:
    """Create a round and invalidate cached statistics."""
    fields = data.model_dump(exclude={"requirements"})
    fields["requirements"] = _requirements_payload(data.requirements)

    round_ = await repository.create(db, fields)
    await db.commit()
    cache.invalidate_stats()

    logger.info(f"Created round {round_.id} ({round_.name}, {round_.status.value})")
    return round_


async def update_round(
    db: AsyncSession,
    round_id: UUID,
    data: RoundUpdate,
    cache: StatsCache,
) -> CompetitionRound:
    """
    Apply a partial update to a round.

    Raises:
        RoundNotFoundError: Unknown round
        InvalidRoundWindowError: The merged window would end before it starts
    """
    round_ = await get_round(db, round_id)

    updates = data.model_dump(exclude_unset=True, exclude={"requirements"})
    if "requirements" in data.model_fields_set:
        updates["requirements"] = _requirements_payload(data.requirements)

    start = updates.get("start_time", round_.start_time)
    end = updates.get("end_time", round_.end_time)
    if start is not None and end is not None and end <= start:
        raise InvalidRoundWindowError()

    repository.apply_updates(round_, updates)
    await db.commit()
    await db.refresh(round_)
    cache.invalidate_stats()

    logger.info(f"Updated round {round_.id}: {sorted(updates)}")
    return round_


async def delete_round(db: AsyncSession, round_id: UUID, cache: StatsCache) -> None:
    """Delete a round together with its submissions."""
    round_ = await get_round(db, round_id)
    await repository.delete_round(db, round_)
    await db.commit()
    cache.invalidate_stats()

    logger.info(f"Deleted round {round_id}")


def stage_documents(round_: CompetitionRound) -> list[StageDocument]:
    """
    Build the document checklist for a round from its requirements.

    The file type is the template's extension, or ``unknown`` when the
    requirement has no template.
    """
    documents = []
    for index, requirement in enumerate(round_.requirements or []):
        template = requirement.get("template") or None
        suffix = PurePosixPath(template).suffix.lstrip(".") if template else ""
        documents.append(
            StageDocument(
                id=f"{round_.id}-doc-{index}",
                name=requirement.get("description", ""),
                description=requirement.get("description", ""),
                file_url=template,
                file_type=suffix or "unknown",
                stage_id=round_.id,
            )
        )
    return documents
