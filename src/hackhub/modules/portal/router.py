"""
Applicant Portal Router

Every endpoint requires an applicant session token.

Endpoints:
- GET /applicant/dashboard - Profile, progress, open rounds and submissions
- GET /applicant/rounds - All competition rounds
- GET /applicant/documents/{stage_id} - Document checklist for a stage
- POST /applicant/submit-stage - Create or update a stage submission
- GET /applicant/my-submissions - The applicant's submissions
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.applicant_auth.dependencies import get_current_applicant
from hackhub.modules.applicants.models import Applicant
from hackhub.modules.competitions import service as round_service
from hackhub.modules.competitions.schemas import (
    RoundListResponse,
    RoundResponse,
    StageDocumentsResponse,
)
from hackhub.modules.portal import service
from hackhub.modules.portal.schemas import DashboardResponse
from hackhub.modules.submissions import service as submission_service
from hackhub.modules.submissions.schemas import (
    SubmissionListResponse,
    SubmissionResponse,
    SubmitStageRequest,
    SubmitStageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    try:
        return await service.build_dashboard(db, applicant)
    except Exception:
        raise_internal_error("load the dashboard")


@router.get("/rounds", response_model=RoundListResponse)
async def rounds(
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
) -> RoundListResponse:
    all_rounds = await round_service.list_rounds(db)
    return RoundListResponse(rounds=[RoundResponse.model_validate(r) for r in all_rounds])


@router.get("/documents/{stage_id}", response_model=StageDocumentsResponse)
async def documents(
    stage_id: UUID,
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
) -> StageDocumentsResponse:
    try:
        docs = await service.stage_documents(db, stage_id)
    except ServiceError as e:
        raise_http_error(e)
    return StageDocumentsResponse(documents=docs)


@router.post(
    "/submit-stage",
    response_model=SubmitStageResponse,
    responses={
        400: {"description": "Stage not active, not started or expired"},
        403: {"description": "Applicant not eligible for the stage"},
        404: {"description": "Stage not found"},
    },
)
async def submit_stage(
    body: SubmitStageRequest,
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> SubmitStageResponse:
    """Submit deliverables for a stage. Resubmitting overwrites the earlier submission."""
    try:
        result = await submission_service.submit(db, applicant, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("submit the stage")

    return SubmitStageResponse(
        message=result.message,
        submission=SubmissionResponse.model_validate(result.submission),
    )


@router.get("/my-submissions", response_model=SubmissionListResponse)
async def my_submissions(
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
) -> SubmissionListResponse:
    submissions = await submission_service.list_applicant_submissions(db, applicant)
    return SubmissionListResponse(
        submissions=[SubmissionResponse.model_validate(s) for s in submissions]
    )
