"""
Stage Submission Repository

Database operations for stage submissions. ``upsert_submission`` relies on
the (applicant_id, stage_id) unique constraint, so concurrent submits for
the same pair converge on a single row instead of racing.
"""

import uuid
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, literal_column, null, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.applicants.models import Applicant
from hackhub.modules.submissions.models import StageSubmission, SubmissionStatus

UNIQUE_PAIR_CONSTRAINT = "uq_stage_submissions_applicant_stage"


async def upsert_submission(
    db: AsyncSession,
    *,
    applicant_id: UUID,
    stage_id: UUID,
    github_url: str | None,
    documents: list[dict[str, Any]],
    submitted_at: datetime,
) -> tuple[StageSubmission, bool]:
    """
    Insert or overwrite the submission for (applicant, stage).

    An overwrite resets the status to submitted and clears the jury review.

    Returns:
        Tuple of (submission, created) where created is False when an
        existing row was updated
    """
    stmt = pg_insert(StageSubmission).values(
        id=uuid.uuid4(),
        applicant_id=applicant_id,
        stage_id=stage_id,
        github_url=github_url,
        documents=documents,
        status=SubmissionStatus.SUBMITTED,
        submitted_at=submitted_at,
    )
    stmt = stmt.on_conflict_do_update(
        constraint=UNIQUE_PAIR_CONSTRAINT,
        set_={
            "github_url": stmt.excluded.github_url,
            "documents": stmt.excluded.documents,
            "status": stmt.excluded.status,
            "submitted_at": stmt.excluded.submitted_at,
            # New content invalidates any earlier review
            "reviewed_by": null(),
            "reviewed_at": null(),
            "score": null(),
            "feedback": null(),
            "updated_at": func.now(),
        },
    ).returning(
        StageSubmission.id,
        # xmax is 0 only for freshly inserted tuples
        literal_column("(xmax = 0)").label("created"),
    )

    row = (await db.execute(stmt)).one()
    submission = await db.get(StageSubmission, row.id, populate_existing=True)
    return submission, bool(row.created)


async def get_by_id(db: AsyncSession, submission_id: UUID) -> StageSubmission | None:
    return await db.get(StageSubmission, submission_id)


async def list_for_applicant(db: AsyncSession, applicant_id: UUID) -> list[StageSubmission]:
    result = await db.execute(
        select(StageSubmission)
        .where(StageSubmission.applicant_id == applicant_id)
        .order_by(StageSubmission.submitted_at.desc().nulls_last())
    )
    return list(result.scalars().all())


async def list_submissions(
    db: AsyncSession,
    *,
    stage_id: UUID | None = None,
    status: SubmissionStatus | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[StageSubmission]:
    """List submissions for review, most recent first."""
    stmt = select(StageSubmission)
    if stage_id is not None:
        stmt = stmt.where(StageSubmission.stage_id == stage_id)
    if status is not None:
        stmt = stmt.where(StageSubmission.status == status)

    result = await db.execute(
        stmt.order_by(StageSubmission.submitted_at.desc().nulls_last()).offset(offset).limit(limit)
    )
    return list(result.scalars().all())


async def count_by_status(db: AsyncSession) -> dict[SubmissionStatus, int]:
    result = await db.execute(
        select(StageSubmission.status, func.count(StageSubmission.id)).group_by(
            StageSubmission.status
        )
    )
    return {status: count for status, count in result.all()}


async def count_by_stage_and_status(
    db: AsyncSession,
) -> dict[UUID, dict[SubmissionStatus, int]]:
    """Submission counts keyed by stage id, then by status."""
    result = await db.execute(
        select(
            StageSubmission.stage_id,
            StageSubmission.status,
            func.count(StageSubmission.id),
        ).group_by(StageSubmission.stage_id, StageSubmission.status)
    )
    counts: dict[UUID, dict[SubmissionStatus, int]] = {}
    for stage_id, status, count in result.all():
        counts.setdefault(stage_id, {})[status] = count
    return counts


async def list_recent_submissions(
    db: AsyncSession, limit: int
) -> list[tuple[StageSubmission, str]]:
    """Most recently submitted rows paired with the applicant's name."""
    result = await db.execute(
        select(StageSubmission, Applicant.name)
        .join(Applicant, Applicant.id == StageSubmission.applicant_id)
        .where(StageSubmission.submitted_at.is_not(None))
        .order_by(StageSubmission.submitted_at.desc())
        .limit(limit)
    )
    return [(submission, name) for submission, name in result.all()]
