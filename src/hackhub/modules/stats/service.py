"""
Admin Statistics Service

Aggregates for the admin dashboard, served through the stats cache.
Writes elsewhere call ``StatsCache.invalidate_stats`` so a cached value
never outlives the data it was computed from by more than one request.
The recent-activity feed is read fresh on every call.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.cache import DASHBOARD_STATS_KEY, STAGE_STATS_KEY, StatsCache
from hackhub.core.config import settings
from hackhub.modules.applicants import repository as applicant_repository
from hackhub.modules.competitions import repository as round_repository
from hackhub.modules.competitions.models import RoundStatus
from hackhub.modules.stats.schemas import ActivityItem, ActivityType, DashboardStats, StageStats
from hackhub.modules.submissions import repository as submission_repository
from hackhub.modules.submissions.models import SubmissionStatus

logger = logging.getLogger(__name__)

# Submission statuses that mean a reviewer has acted
REVIEWED_STATUSES = frozenset(
    {SubmissionStatus.REVIEWED, SubmissionStatus.SELECTED, SubmissionStatus.REJECTED}
)


def _by_value(counts: dict) -> dict[str, int]:
    return {status.value: count for status, count in counts.items()}


async def _load_dashboard_stats(db: AsyncSession) -> DashboardStats:
    applicant_counts = await applicant_repository.count_by_status(db)
    submission_counts = await submission_repository.count_by_status(db)
    rounds = await round_repository.list_rounds(db)

    return DashboardStats(
        total_applicants=sum(applicant_counts.values()),
        applicants_by_status=_by_value(applicant_counts),
        total_submissions=sum(submission_counts.values()),
        submissions_by_status=_by_value(submission_counts),
        pending_review=submission_counts.get(SubmissionStatus.SUBMITTED, 0),
        reviewed=sum(submission_counts.get(s, 0) for s in REVIEWED_STATUSES),
        total_rounds=len(rounds),
        active_rounds=sum(1 for r in rounds if r.status == RoundStatus.ACTIVE),
    )


async def _load_stage_stats(db: AsyncSession) -> list[StageStats]:
    rounds = await round_repository.list_rounds(db)
    counts = await submission_repository.count_by_stage_and_status(db)

    stages = []
    for round_ in rounds:
        per_status = counts.get(round_.id, {})
        stages.append(
            StageStats(
                stage_id=round_.id,
                name=round_.name,
                status=round_.status,
                total_submissions=sum(per_status.values()),
                submissions_by_status=_by_value(per_status),
            )
        )
    return stages


async def dashboard_stats(db: AsyncSession, cache: StatsCache) -> DashboardStats:
    return await cache.get_or_load(DASHBOARD_STATS_KEY, lambda: _load_dashboard_stats(db))


async def stage_stats(db: AsyncSession, cache: StatsCache) -> list[StageStats]:
    return await cache.get_or_load(
        STAGE_STATS_KEY,
        lambda: _load_stage_stats(db),
        ttl_seconds=settings.stage_stats_cache_ttl_seconds,
    )


def clear_cache(cache: StatsCache) -> int:
    cleared = len(cache)
    cache.clear()
    logger.info(f"Stats cache cleared ({cleared} entries)")
    return cleared


async def recent_activity(db: AsyncSession, limit: int = 10) -> list[ActivityItem]:
    """
    Merge the latest registrations, submissions and selections.

    Each source is capped at ``limit`` before merging, so the newest
    ``limit`` events overall are always present. Not cached.
    """
    items = [
        ActivityItem(
            type=ActivityType.REGISTRATION,
            applicant_id=a.id,
            applicant_name=a.name,
            action="registered",
            timestamp=a.created_at,
        )
        for a in await applicant_repository.list_recent_registrations(db, limit)
    ]
    items.extend(
        ActivityItem(
            type=ActivityType.SUBMISSION,
            applicant_id=submission.applicant_id,
            applicant_name=name,
            action="submitted project",
            stage_name=submission.stage.name if submission.stage else None,
            timestamp=submission.submitted_at,
        )
        for submission, name in await submission_repository.list_recent_submissions(db, limit)
    )
    items.extend(
        ActivityItem(
            type=ActivityType.SELECTION,
            applicant_id=a.id,
            applicant_name=a.name,
            action="was selected",
            timestamp=a.selected_at,
        )
        for a in await applicant_repository.list_recent_selections(db, limit)
    )

    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit]
