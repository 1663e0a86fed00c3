"""
Background Job Scheduler

Scheduled housekeeping using APScheduler's AsyncIOScheduler.

Design Principles:
- Jobs are idempotent (safe to run multiple times)
- Jobs open their own database sessions
- Failed jobs are logged but don't crash the scheduler
- Jobs can be triggered manually by admins

Usage:
    register_job("my_job", my_job, IntervalTrigger(hours=1))
    await start_scheduler()
    ...
    await stop_scheduler()

Jobs may be registered before or after the scheduler starts; anything
registered earlier is added when ``start_scheduler`` runs.
"""

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, Any]]


@dataclass
class _RegisteredJob:
    func: JobFunc
    trigger: BaseTrigger


# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None

# Job registry, also used for manual triggering
_job_registry: dict[str, _RegisteredJob] = {}


class SchedulerConfig:
    """Configuration for the background scheduler."""

    TIMEZONE = "UTC"

    JOB_DEFAULTS = {
        "coalesce": True,  # Combine missed executions into one
        "max_instances": 1,
        "misfire_grace_time": 60 * 5,
    }


def _job_listener(event: JobExecutionEvent) -> None:
    """Log job execution results."""
    if event.exception:
        logger.error(
            f"Job {event.job_id} failed with exception: {event.exception}",
            exc_info=event.exception,
        )
    else:
        logger.info(f"Job {event.job_id} executed successfully")


def _add_to_scheduler(job_id: str, job: _RegisteredJob) -> None:
    if _scheduler is None:
        return
    _scheduler.add_job(job.func, trigger=job.trigger, id=job_id, replace_existing=True)
    logger.info(f"Scheduled job: {job_id}")


async def start_scheduler() -> AsyncIOScheduler:
    """
    Create and start the scheduler, adding every registered job.

    Returns:
        The running scheduler instance
    """
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        logger.warning("Scheduler already running, returning existing instance")
        return _scheduler

    logger.info("Initializing background job scheduler...")

    _scheduler = AsyncIOScheduler(
        timezone=SchedulerConfig.TIMEZONE,
        job_defaults=SchedulerConfig.JOB_DEFAULTS,
    )
    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    for job_id, job in _job_registry.items():
        _add_to_scheduler(job_id, job)

    _scheduler.start()

    logger.info(f"Background job scheduler started with {len(_job_registry)} job(s)")
    return _scheduler


async def stop_scheduler() -> None:
    """Stop the scheduler, waiting for running jobs to finish."""
    global _scheduler

    if _scheduler is None or not _scheduler.running:
        logger.debug("Scheduler not running, nothing to stop")
        _scheduler = None
        return

    logger.info("Stopping background job scheduler...")
    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Background job scheduler stopped")


def register_job(job_id: str, func: JobFunc, trigger: BaseTrigger) -> None:
    """
    Register a job with the scheduler.

    Args:
        job_id: Unique identifier for the job
        func: Async function to execute
        trigger: APScheduler trigger (IntervalTrigger, CronTrigger, etc.)
    """
    job = _RegisteredJob(func=func, trigger=trigger)
    _job_registry[job_id] = job
    _add_to_scheduler(job_id, job)


async def trigger_job_manually(job_id: str) -> dict[str, Any]:
    """
    Run a registered job immediately, bypassing the schedule.

    Returns:
        Dict with job_id, status ("success" or "error"), executed_at,
        and either the job's result or the error message

    Raises:
        KeyError: If job_id is not registered
    """
    if job_id not in _job_registry:
        raise KeyError(job_id)

    executed_at = datetime.now(UTC)
    logger.info(f"Manually triggering job: {job_id}")

    try:
        result = await _job_registry[job_id].func()
    except Exception as e:
        logger.error(f"Manual execution of job {job_id} failed: {e}", exc_info=True)
        return {
            "job_id": job_id,
            "status": "error",
            "executed_at": executed_at.isoformat(),
            "error": str(e),
        }

    return {
        "job_id": job_id,
        "status": "success",
        "executed_at": executed_at.isoformat(),
        "result": result,
    }


def list_registered_jobs() -> list[dict[str, Any]]:
    """List registered jobs with their next scheduled run time."""
    jobs = []

    for job_id in _job_registry:
        next_run_time = None
        if _scheduler is not None:
            scheduled = _scheduler.get_job(job_id)
            if scheduled is not None and scheduled.next_run_time is not None:
                next_run_time = scheduled.next_run_time.isoformat()

        jobs.append({"job_id": job_id, "next_run_time": next_run_time})

    return jobs
