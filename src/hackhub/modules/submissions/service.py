"""
Submission Recorder

Records applicant submissions to competition rounds and jury reviews.

Submission flow:
1. Reload every round and re-run the eligibility gate at write time
   (nothing computed for the dashboard is trusted)
2. Upsert the (applicant, stage) submission
3. Append one progress entry
4. Commit steps 2 and 3 together, or roll both back

Submitting never changes the applicant's own status; only staff do that.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser
from hackhub.core.cache import StatsCache
from hackhub.core.errors import NotFoundError
from hackhub.modules.applicants import repository as applicant_repository
from hackhub.modules.applicants.models import Applicant
from hackhub.modules.competitions import repository as round_repository
from hackhub.modules.competitions.eligibility import check_submission_gate
from hackhub.modules.submissions import repository
from hackhub.modules.submissions.models import StageSubmission, SubmissionStatus
from hackhub.modules.submissions.schemas import ReviewRequest, SubmitStageRequest

logger = logging.getLogger(__name__)

PROGRESS_STATUS_COMPLETED = "completed"


class SubmissionNotFoundError(NotFoundError):
    def __init__(self, submission_id: UUID):
        super().__init__(
            message=f"Submission {submission_id} not found",
            error_code="SUBMISSION_NOT_FOUND",
        )


@dataclass
class SubmitResult:
    submission: StageSubmission
    created: bool

    @property
    def message(self) -> str:
        if self.created:
            return "Submission created successfully"
        return "Submission updated successfully"


async def submit(
    db: AsyncSession,
    applicant: Applicant,
    request: SubmitStageRequest,
    cache: StatsCache | None = None,
    now: datetime | None = None,
) -> SubmitResult:
    """
    Record a submission for the applicant to ``request.stage_id``.

    Raises:
        StageNotFoundError, StageInactiveError, StageNotStartedError,
        StageExpiredError, NotEligibleError: From the eligibility gate
    """
    now = now or datetime.now(UTC)

    rounds = await round_repository.list_rounds(db)
    stage = check_submission_gate(applicant.status, request.stage_id, rounds, now)

    try:
        submission, created = await repository.upsert_submission(
            db,
            applicant_id=applicant.id,
            stage_id=stage.id,
            github_url=str(request.github_url) if request.github_url else None,
            documents=[doc.model_dump(mode="json") for doc in request.documents],
            submitted_at=now,
        )
        await applicant_repository.add_progress(
            db,
            applicant_id=applicant.id,
            stage=f"stage_{stage.id}",
            status=PROGRESS_STATUS_COMPLETED,
            description=f"Submitted for {stage.name}",
            completed_at=now,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if cache is not None:
        cache.invalidate_stats()

    logger.info(
        f"Applicant {applicant.id} {'created' if created else 'updated'} "
        f"submission {submission.id} for stage {stage.id}"
    )
    return SubmitResult(submission=submission, created=created)


async def list_applicant_submissions(
    db: AsyncSession, applicant: Applicant
) -> list[StageSubmission]:
    return await repository.list_for_applicant(db, applicant.id)


async def list_submissions(
    db: AsyncSession,
    *,
    stage_id: UUID | None = None,
    status: SubmissionStatus | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[StageSubmission]:
    return await repository.list_submissions(
        db, stage_id=stage_id, status=status, limit=limit, offset=offset
    )


async def get_submission(db: AsyncSession, submission_id: UUID) -> StageSubmission:
    submission = await repository.get_by_id(db, submission_id)
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    return submission


async def review_submission(
    db: AsyncSession,
    submission_id: UUID,
    review: ReviewRequest,
    reviewer: StaffUser,
    cache: StatsCache,
) -> StageSubmission:
    """Record a jury decision on a submission."""
    submission = await get_submission(db, submission_id)

    submission.status = SubmissionStatus(review.status.value)
    submission.score = review.score
    submission.feedback = review.feedback
    submission.reviewed_by = reviewer.id
    submission.reviewed_at = datetime.now(UTC)

    await db.commit()
    await db.refresh(submission)
    cache.invalidate_stats()

    logger.info(
        f"Submission {submission_id} reviewed by {reviewer.email}: {submission.status.value}"
    )
    return submission
