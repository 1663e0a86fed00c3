"""
Applicant Repository

Database operations for applicants and their progress trail.

Functions only add/flush; the calling service owns the transaction and
decides when to commit, so several writes can land atomically.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.applicant_auth.models import OneTimePassword
from hackhub.modules.applicants.models import Applicant, ApplicantStatus, ApplicationProgress

# Statuses that are never left once reached
TERMINAL_STATUSES: frozenset[ApplicantStatus] = frozenset(
    {ApplicantStatus.WON, ApplicantStatus.NOT_SELECTED, ApplicantStatus.REJECTED}
)

# Round markers kept from earlier events; staff may move applicants in and
# out of them freely as long as no terminal status is involved.
LEGACY_STATUSES: frozenset[ApplicantStatus] = frozenset(
    {
        ApplicantStatus.ORIENTATION_SENT,
        ApplicantStatus.SUBMISSION_ENABLED,
        ApplicantStatus.UNDER_REVIEW,
        ApplicantStatus.EVENT_REGISTERED,
        ApplicantStatus.ROUND1,
        ApplicantStatus.ROUND2,
        ApplicantStatus.ROUND3,
        ApplicantStatus.FINALIST,
    }
)

# Valid staff-driven transitions between the main workflow statuses
VALID_STATUS_TRANSITIONS: dict[ApplicantStatus, set[ApplicantStatus]] = {
    ApplicantStatus.REGISTERED: {
        ApplicantStatus.SELECTED,
        ApplicantStatus.NOT_SELECTED,
        ApplicantStatus.REJECTED,
    },
    ApplicantStatus.SELECTED: {
        ApplicantStatus.REGISTERED,  # Selection withdrawn
        ApplicantStatus.CONFIRMED,
        ApplicantStatus.SUBMITTED,
        ApplicantStatus.NOT_SELECTED,
    },
    ApplicantStatus.CONFIRMED: {
        ApplicantStatus.SUBMITTED,
        ApplicantStatus.WON,
        ApplicantStatus.NOT_SELECTED,
    },
    ApplicantStatus.SUBMITTED: {
        ApplicantStatus.WON,
        ApplicantStatus.NOT_SELECTED,
    },
    ApplicantStatus.WON: set(),
    ApplicantStatus.NOT_SELECTED: set(),
    ApplicantStatus.REJECTED: set(),
}


def is_valid_transition(current: ApplicantStatus, new: ApplicantStatus) -> bool:
    """Check whether staff may move an applicant from ``current`` to ``new``."""
    if current == new:
        return True
    if current in TERMINAL_STATUSES:
        return False
    if current in LEGACY_STATUSES or new in LEGACY_STATUSES:
        return True
    return new in VALID_STATUS_TRANSITIONS.get(current, set())


# ============================================
# Applicant Lookups
# ============================================


async def get_by_id(db: AsyncSession, applicant_id: UUID) -> Applicant | None:
    return await db.get(Applicant, applicant_id)


async def get_by_email(db: AsyncSession, email: str) -> Applicant | None:
    """Get an applicant by email (case-insensitive)."""
    result = await db.execute(
        select(Applicant).where(func.lower(Applicant.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def get_by_mobile(db: AsyncSession, mobile: str) -> Applicant | None:
    """Get the earliest-registered applicant with this mobile number."""
    result = await db.execute(
        select(Applicant)
        .where(Applicant.mobile == mobile.strip())
        .order_by(Applicant.created_at)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_by_identifier(db: AsyncSession, identifier: str) -> Applicant | None:
    """Resolve a login identifier: an email address if it contains '@', otherwise a mobile."""
    if "@" in identifier:
        return await get_by_email(db, identifier)
    return await get_by_mobile(db, identifier)


async def get_by_registration_id(db: AsyncSession, registration_id: str) -> Applicant | None:
    result = await db.execute(
        select(Applicant).where(Applicant.registration_id == registration_id.strip().upper())
    )
    return result.scalar_one_or_none()


async def registration_id_exists(db: AsyncSession, registration_id: str) -> bool:
    result = await db.execute(
        select(Applicant.id).where(Applicant.registration_id == registration_id)
    )
    return result.scalar_one_or_none() is not None


async def get_many_by_ids(db: AsyncSession, applicant_ids: list[UUID]) -> list[Applicant]:
    result = await db.execute(select(Applicant).where(Applicant.id.in_(applicant_ids)))
    return list(result.scalars().all())


async def get_many_by_registration_ids(
    db: AsyncSession, registration_ids: list[str]
) -> list[Applicant]:
    result = await db.execute(
        select(Applicant).where(Applicant.registration_id.in_(registration_ids))
    )
    return list(result.scalars().all())


async def list_applicants(
    db: AsyncSession,
    *,
    status: ApplicantStatus | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Applicant], int]:
    """
    List applicants with optional filters, newest first.

    Args:
        db: Database session
        status: Only applicants with this status
        search: Case-insensitive match on name, email, registration ID or college
        page: 1-based page number
        page_size: Items per page

    Returns:
        Tuple of (applicants on this page, total matching count)
    """
    conditions = []
    if status is not None:
        conditions.append(Applicant.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                Applicant.name.ilike(pattern),
                Applicant.email.ilike(pattern),
                Applicant.registration_id.ilike(pattern),
                Applicant.college_name.ilike(pattern),
            )
        )

    count_result = await db.execute(select(func.count(Applicant.id)).where(*conditions))
    total = count_result.scalar_one()

    result = await db.execute(
        select(Applicant)
        .where(*conditions)
        .order_by(Applicant.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def count_by_status(db: AsyncSession) -> dict[ApplicantStatus, int]:
    result = await db.execute(
        select(Applicant.status, func.count(Applicant.id)).group_by(Applicant.status)
    )
    return {status: count for status, count in result.all()}


async def list_recent_registrations(db: AsyncSession, limit: int) -> list[Applicant]:
    result = await db.execute(select(Applicant).order_by(Applicant.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def list_recent_selections(db: AsyncSession, limit: int) -> list[Applicant]:
    result = await db.execute(
        select(Applicant)
        .where(Applicant.selected_at.is_not(None))
        .order_by(Applicant.selected_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


# ============================================
# Applicant Writes
# ============================================


async def create(
    db: AsyncSession,
    *,
    registration_id: str,
    fields: dict[str, Any],
    status: ApplicantStatus = ApplicantStatus.REGISTERED,
) -> Applicant:
    """Insert a new applicant."""
    applicant = Applicant(registration_id=registration_id, status=status, **fields)
    db.add(applicant)
    await db.flush()
    await db.refresh(applicant)
    return applicant


def apply_updates(applicant: Applicant, updates: dict[str, Any]) -> Applicant:
    """Copy known attributes from ``updates`` onto the applicant."""
    for key, value in updates.items():
        if hasattr(applicant, key):
            setattr(applicant, key, value)
    return applicant


async def delete_applicant(db: AsyncSession, applicant: Applicant) -> None:
    """
    Delete an applicant and everything attached to it.

    Sessions, submissions and progress rows cascade at the database level.
    OTP records are keyed by identifier, so they are removed explicitly.
    """
    await db.execute(
        delete(OneTimePassword).where(
            OneTimePassword.identifier.in_([applicant.email.lower(), applicant.mobile])
        )
    )
    await db.delete(applicant)
    await db.flush()


# ============================================
# Application Progress
# ============================================


async def add_progress(
    db: AsyncSession,
    *,
    applicant_id: UUID,
    stage: str,
    status: str,
    description: str | None = None,
    completed_at: datetime | None = None,
) -> ApplicationProgress:
    """Append one audit entry to an applicant's progress trail."""
    entry = ApplicationProgress(
        applicant_id=applicant_id,
        stage=stage,
        status=status,
        description=description,
        completed_at=completed_at or datetime.now(UTC),
    )
    db.add(entry)
    await db.flush()
    return entry


async def list_progress(db: AsyncSession, applicant_id: UUID) -> list[ApplicationProgress]:
    result = await db.execute(
        select(ApplicationProgress)
        .where(ApplicationProgress.applicant_id == applicant_id)
        .order_by(ApplicationProgress.created_at)
    )
    return list(result.scalars().all())
