"""
Applicant Auth Background Jobs

Hourly housekeeping that deletes expired OTP records and expired
sessions. Expiry is always checked at use time, so this job only keeps
the tables small; correctness never depends on it having run.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from hackhub.core.database import async_session_maker
from hackhub.core.scheduler import register_job
from hackhub.modules.applicant_auth import repository

logger = logging.getLogger(__name__)

JOB_ID_SWEEP_EXPIRED = "applicant_auth_sweep_expired"


async def sweep_expired_credentials() -> dict[str, Any]:
    """
    Delete expired OTP records and sessions.

    Returns:
        Dict with the number of rows removed from each table
    """
    now = datetime.now(UTC)

    async with async_session_maker() as db:
        otps_deleted = await repository.delete_expired_otps(db, now)
        sessions_deleted = await repository.delete_expired_sessions(db, now)
        await db.commit()

    logger.info(
        f"Credential sweep completed. OTPs deleted: {otps_deleted}, "
        f"sessions deleted: {sessions_deleted}"
    )
    return {"otps_deleted": otps_deleted, "sessions_deleted": sessions_deleted}


def register_applicant_auth_jobs() -> None:
    """Register the hourly credential sweep."""
    register_job(
        job_id=JOB_ID_SWEEP_EXPIRED,
        func=sweep_expired_credentials,
        trigger=IntervalTrigger(hours=1),
    )
    logger.info(f"Registered job: {JOB_ID_SWEEP_EXPIRED} (interval: 1 hour)")
