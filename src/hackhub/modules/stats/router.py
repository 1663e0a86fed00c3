"""
Admin Statistics Router

Admin only (declared where the router is mounted).

Endpoints:
- GET /admin/stats/dashboard - Applicant and submission totals
- GET /admin/stats/stages - Submission counts per round
- GET /admin/recent-activity - Latest registrations, submissions and selections
- POST /admin/cache/clear - Drop all cached statistics
- GET /admin/jobs - Registered background jobs
- POST /admin/jobs/{job_id}/trigger - Run a background job now
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import raise_internal_error
from hackhub.core.scheduler import list_registered_jobs, trigger_job_manually
from hackhub.modules.stats import service
from hackhub.modules.stats.schemas import (
    CacheClearResponse,
    DashboardStats,
    JobListResponse,
    RecentActivityResponse,
    StageStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats/dashboard", response_model=DashboardStats)
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> DashboardStats:
    try:
        return await service.dashboard_stats(db, cache)
    except Exception:
        raise_internal_error("load dashboard statistics")


@router.get("/stats/stages", response_model=StageStatsResponse)
async def stage_stats(
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> StageStatsResponse:
    try:
        stages = await service.stage_stats(db, cache)
    except Exception:
        raise_internal_error("load stage statistics")
    return StageStatsResponse(stages=stages)


@router.get("/recent-activity", response_model=RecentActivityResponse)
async def recent_activity(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> RecentActivityResponse:
    try:
        activities = await service.recent_activity(db, limit)
    except Exception:
        raise_internal_error("load recent activity")
    return RecentActivityResponse(activities=activities)


@router.post("/cache/clear", response_model=CacheClearResponse)
async def clear_cache(
    staff: StaffUser = Depends(get_current_staff_user),
    cache: StatsCache = Depends(get_stats_cache),
) -> CacheClearResponse:
    cleared = service.clear_cache(cache)
    logger.info(f"Stats cache cleared by {staff.email}")
    return CacheClearResponse(message="Cache cleared", cleared=cleared)


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs() -> JobListResponse:
    """List registered background jobs with their next run time."""
    return JobListResponse(jobs=list_registered_jobs())


@router.post("/jobs/{job_id}/trigger")
async def trigger_job(
    job_id: str,
    staff: StaffUser = Depends(get_current_staff_user),
) -> dict:
    """
    Run a background job immediately, outside its schedule.

    Raises:
        HTTPException 404: If no job has this id
    """
    logger.info(f"Job {job_id} triggered manually by {staff.email}")
    try:
        return await trigger_job_manually(job_id)
    except KeyError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "JOB_NOT_FOUND", "message": f"Unknown job: {job_id}"},
        ) from e
