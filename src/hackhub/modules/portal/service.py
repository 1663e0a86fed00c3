"""
Applicant Portal Service

Read models for the logged-in applicant. Open rounds are recomputed from
the applicant's current status on every call.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.applicants import repository as applicant_repository
from hackhub.modules.applicants.models import Applicant, ApplicantStatus
from hackhub.modules.applicants.schemas import ApplicantResponse, ProgressEntryResponse
from hackhub.modules.competitions import repository as round_repository
from hackhub.modules.competitions import service as round_service
from hackhub.modules.competitions.eligibility import StageNotFoundError, compute_open_rounds
from hackhub.modules.competitions.models import CompetitionRound
from hackhub.modules.competitions.schemas import RoundResponse, StageDocument
from hackhub.modules.portal.schemas import DashboardResponse
from hackhub.modules.submissions import repository as submission_repository
from hackhub.modules.submissions.schemas import SubmissionResponse

logger = logging.getLogger(__name__)


def requires_confirmation(applicant: Applicant) -> bool:
    return applicant.status == ApplicantStatus.SELECTED and applicant.confirmed_at is None


async def open_rounds_for(
    db: AsyncSession, applicant: Applicant, now: datetime | None = None
) -> list[CompetitionRound]:
    rounds = await round_repository.list_rounds(db)
    return compute_open_rounds(applicant.status, rounds, now or datetime.now(UTC))


async def build_dashboard(
    db: AsyncSession, applicant: Applicant, now: datetime | None = None
) -> DashboardResponse:
    """
    Assemble the applicant dashboard.

    Args:
        db: Database session
        applicant: The logged-in applicant
        now: Override the current time

    Returns:
        Profile, progress trail, open rounds, submissions and the
        confirmation flag
    """
    progress = await applicant_repository.list_progress(db, applicant.id)
    active_rounds = await open_rounds_for(db, applicant, now)
    submissions = await submission_repository.list_for_applicant(db, applicant.id)

    logger.debug(
        f"Dashboard for applicant {applicant.id} ({applicant.status.value}): "
        f"{len(active_rounds)} open rounds"
    )

    return DashboardResponse(
        applicant=ApplicantResponse.model_validate(applicant),
        progress=[ProgressEntryResponse.model_validate(p) for p in progress],
        active_rounds=[RoundResponse.model_validate(r) for r in active_rounds],
        submissions=[SubmissionResponse.model_validate(s) for s in submissions],
        current_status=applicant.status,
        requires_confirmation=requires_confirmation(applicant),
    )


async def stage_documents(db: AsyncSession, stage_id: UUID) -> list[StageDocument]:
    """
    Document checklist for a stage.

    Raises:
        StageNotFoundError: If no round has this id
    """
    round_ = await round_repository.get_by_id(db, stage_id)
    if round_ is None:
        raise StageNotFoundError()
    return round_service.stage_documents(round_)
