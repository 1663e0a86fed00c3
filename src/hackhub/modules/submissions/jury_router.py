"""
Jury Review Router

Submission review for jury members and admins (role check declared where
the router is mounted).

Endpoints:
- GET /jury/submissions - List submissions, filterable by stage and status
- GET /jury/submissions/{id} - A single submission
- POST /jury/submissions/{id}/review - Record a review decision
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.submissions import service
from hackhub.modules.submissions.models import SubmissionStatus
from hackhub.modules.submissions.schemas import (
    ReviewRequest,
    SubmissionListResponse,
    SubmissionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/submissions", response_model=SubmissionListResponse)
async def list_submissions(
    stage_id: UUID | None = Query(None),
    status: SubmissionStatus | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> SubmissionListResponse:
    submissions = await service.list_submissions(
        db, stage_id=stage_id, status=status, limit=limit, offset=offset
    )
    return SubmissionListResponse(
        submissions=[SubmissionResponse.model_validate(s) for s in submissions]
    )


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    try:
        submission = await service.get_submission(db, submission_id)
    except ServiceError as e:
        raise_http_error(e)
    return SubmissionResponse.model_validate(submission)


@router.post("/submissions/{submission_id}/review", response_model=SubmissionResponse)
async def review_submission(
    submission_id: UUID,
    body: ReviewRequest,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> SubmissionResponse:
    try:
        submission = await service.review_submission(db, submission_id, body, staff, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("review the submission")

    return SubmissionResponse.model_validate(submission)
