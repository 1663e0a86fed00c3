"""
Applicant Admin Router

Applicant management for staff. ``read_router`` and ``select_router``
are open to admins and jury; ``router`` is admin only. Role checks are
declared where the routers are mounted.

Endpoints:
- GET /admin/applicants - List applicants (status filter, search, paging)
- GET /admin/applicants/{id} - Applicant detail
- GET /admin/applicants/{id}/progress - Progress trail
- POST /admin/applicants/{id}/select - Select for the hackathon
- POST /admin/applicants - Create an applicant
- PATCH /admin/applicants/{id} - Partial update
- DELETE /admin/applicants/{id} - Delete with all related records
- POST /admin/applicants/bulk-status - Move many applicants to one status
- POST /admin/notifications/send - Email a message to applicants
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.applicants import repository, service
from hackhub.modules.applicants.models import ApplicantStatus
from hackhub.modules.applicants.schemas import (
    ApplicantAdminResponse,
    ApplicantCreate,
    ApplicantListResponse,
    ApplicantUpdate,
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    NotificationRequest,
    NotificationResponse,
    ProgressEntryResponse,
)

logger = logging.getLogger(__name__)

read_router = APIRouter()
select_router = APIRouter()
router = APIRouter()
notifications_router = APIRouter()


# ============================================
# Admin + Jury
# ============================================


@read_router.get("", response_model=ApplicantListResponse)
async def list_applicants(
    status_filter: ApplicantStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApplicantListResponse:
    result = await service.list_applicants(
        db, status=status_filter, search=search, page=page, page_size=page_size
    )
    return ApplicantListResponse(
        items=[ApplicantAdminResponse.model_validate(a) for a in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@read_router.get("/{applicant_id}", response_model=ApplicantAdminResponse)
async def get_applicant(
    applicant_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApplicantAdminResponse:
    try:
        applicant = await service.get_applicant(db, applicant_id)
    except ServiceError as e:
        raise_http_error(e)
    return ApplicantAdminResponse.model_validate(applicant)


@read_router.get("/{applicant_id}/progress", response_model=list[ProgressEntryResponse])
async def get_applicant_progress(
    applicant_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[ProgressEntryResponse]:
    try:
        applicant = await service.get_applicant(db, applicant_id)
    except ServiceError as e:
        raise_http_error(e)
    entries = await repository.list_progress(db, applicant.id)
    return [ProgressEntryResponse.model_validate(p) for p in entries]


@select_router.post("/{applicant_id}/select", response_model=ApplicantAdminResponse)
async def select_applicant(
    applicant_id: UUID,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> ApplicantAdminResponse:
    try:
        applicant = await service.select_applicant(db, applicant_id, staff, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("select the applicant")

    return ApplicantAdminResponse.model_validate(applicant)


# ============================================
# Admin only
# ============================================


@router.post("", response_model=ApplicantAdminResponse, status_code=status.HTTP_201_CREATED)
async def create_applicant(
    body: ApplicantCreate,
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> ApplicantAdminResponse:
    try:
        applicant = await service.create_applicant(db, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("create the applicant")

    return ApplicantAdminResponse.model_validate(applicant)


@router.post("/bulk-status", response_model=BulkStatusUpdateResponse)
async def bulk_update_status(
    body: BulkStatusUpdateRequest,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> BulkStatusUpdateResponse:
    try:
        return await service.bulk_update_status(db, body, staff, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update applicant statuses")


@router.patch("/{applicant_id}", response_model=ApplicantAdminResponse)
async def update_applicant(
    applicant_id: UUID,
    body: ApplicantUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> ApplicantAdminResponse:
    try:
        applicant = await service.update_applicant(db, applicant_id, body, cache, staff)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update the applicant")

    return ApplicantAdminResponse.model_validate(applicant)


@router.delete("/{applicant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_applicant(
    applicant_id: UUID,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> None:
    try:
        await service.delete_applicant(db, applicant_id, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("delete the applicant")

    logger.info(f"Applicant {applicant_id} deleted by {staff.email}")


@notifications_router.post("/send", response_model=NotificationResponse)
async def send_notifications(
    body: NotificationRequest,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    logger.info(f"{staff.email} sending notification to {len(body.applicant_ids)} applicants")
    try:
        return await service.send_notifications(db, body)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("send notifications")
