"""
Applicant Service Layer

Business logic for the applicant identity store.

This module implements:
1. Registration:
   - Reject duplicate email addresses
   - Allocate a unique registration ID (HKT + year + 6 digits)
   - Record the first progress entry and send a confirmation email

2. Participation Confirmation:
   - Selected applicants confirm they will attend, either from the portal
     or through the public link in the selection email

3. Staff Management:
   - List, create, update and delete applicants
   - Select applicants and apply bulk status changes, validated against
     the status transition table
   - Broadcast notifications by email

Every write invalidates the cached dashboard statistics.
"""

import logging
import math
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser
from hackhub.core.cache import StatsCache
from hackhub.core.email import (
    send_notification,
    send_participation_confirmed,
    send_registration_confirmation,
    send_selection_notification,
)
from hackhub.core.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    ServiceError,
)
from hackhub.modules.applicants import repository
from hackhub.modules.applicants.models import Applicant, ApplicantStatus
from hackhub.modules.applicants.schemas import (
    ApplicantCreate,
    ApplicantRegister,
    ApplicantUpdate,
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    NotificationRequest,
    NotificationResponse,
    NotificationResult,
    NotificationSummary,
)

logger = logging.getLogger(__name__)

REGISTRATION_ID_PREFIX = "HKT"
REGISTRATION_ID_DIGITS = 6
MAX_REGISTRATION_ID_ATTEMPTS = 10

PROGRESS_COMPLETED = "completed"

# Fields an update may clear by sending null
NULLABLE_FIELDS = frozenset({"linkedin_profile", "notes"})


class DuplicateApplicantError(ConflictError):
    def __init__(self):
        super().__init__(
            message="An applicant with this email is already registered",
            error_code="DUPLICATE_APPLICANT",
        )


class UnknownApplicantError(NotFoundError):
    def __init__(self, message: str = "Applicant not found"):
        super().__init__(message=message, error_code="APPLICANT_NOT_FOUND")


class ConfirmationUnavailableError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Participation confirmation not available at this stage",
            error_code="CONFIRMATION_UNAVAILABLE",
        )


class AlreadyConfirmedError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Participation already confirmed",
            error_code="ALREADY_CONFIRMED",
        )


class StatusTransitionError(InvalidRequestError):
    def __init__(self, current: ApplicantStatus, new: ApplicantStatus):
        super().__init__(
            message=f"Cannot change status from {current.value} to {new.value}",
            error_code="INVALID_STATUS_TRANSITION",
        )


class RegistrationIdExhaustedError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Could not allocate a registration ID. Please try again.",
            error_code="REGISTRATION_ID_UNAVAILABLE",
            status_code=500,
        )


@dataclass
class ApplicantPage:
    items: list[Applicant]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def generate_registration_id(now: datetime | None = None) -> str:
    """Draw a candidate registration ID such as ``HKT2026048213``."""
    year = (now or datetime.now(UTC)).year
    number = secrets.randbelow(10**REGISTRATION_ID_DIGITS)
    return f"{REGISTRATION_ID_PREFIX}{year}{number:0{REGISTRATION_ID_DIGITS}d}"


async def allocate_registration_id(db: AsyncSession, now: datetime | None = None) -> str:
    """
    Generate a registration ID not yet used by any applicant.

    Raises:
        RegistrationIdExhaustedError: If every attempt collided
    """
    for _ in range(MAX_REGISTRATION_ID_ATTEMPTS):
        candidate = generate_registration_id(now)
        if not await repository.registration_id_exists(db, candidate):
            return candidate
        logger.warning(f"Registration ID collision on {candidate}, retrying")
    raise RegistrationIdExhaustedError()


def _apply_status(
    applicant: Applicant,
    new_status: ApplicantStatus,
    now: datetime,
    staff: StaffUser | None = None,
) -> None:
    """Set the status and the timestamps that go with it."""
    if not repository.is_valid_transition(applicant.status, new_status):
        raise StatusTransitionError(applicant.status, new_status)

    applicant.status = new_status
    if new_status == ApplicantStatus.SELECTED:
        applicant.selected_at = now
        applicant.selected_by = staff.id if staff else None
    elif new_status == ApplicantStatus.CONFIRMED and applicant.confirmed_at is None:
        applicant.confirmed_at = now


# ============================================
# Registration
# ============================================


async def register(
    db: AsyncSession,
    data: ApplicantRegister,
    cache: StatsCache | None = None,
    now: datetime | None = None,
) -> Applicant:
    """
    Register a new applicant.

    Args:
        db: Database session
        data: Registration form
        cache: Stats cache to invalidate
        now: Override the current time

    Returns:
        The created applicant

    Raises:
        DuplicateApplicantError: If the email is already registered
    """
    now = now or datetime.now(UTC)

    if await repository.get_by_email(db, data.email):
        raise DuplicateApplicantError()

    registration_id = await allocate_registration_id(db, now)

    try:
        applicant = await repository.create(
            db,
            registration_id=registration_id,
            fields=data.model_dump(),
        )
        await repository.add_progress(
            db,
            applicant_id=applicant.id,
            stage="registered",
            status=PROGRESS_COMPLETED,
            description="Registration completed",
            completed_at=now,
        )
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise DuplicateApplicantError() from None

    if cache is not None:
        cache.invalidate_stats()

    logger.info(f"Applicant registered: {applicant.registration_id}")

    try:
        email_sent = await send_registration_confirmation(
            to_email=applicant.email,
            applicant_name=applicant.name,
            registration_id=applicant.registration_id,
        )
        if not email_sent:
            logger.error(f"Failed to send registration email for {applicant.registration_id}")
    except Exception as e:
        logger.error(f"Exception sending registration email for {applicant.registration_id}: {e}")

    return applicant


# ============================================
# Participation Confirmation
# ============================================


async def confirm_participation(
    db: AsyncSession,
    applicant: Applicant,
    cache: StatsCache | None = None,
    now: datetime | None = None,
) -> Applicant:
    """
    Confirm attendance for a selected applicant.

    Raises:
        ConfirmationUnavailableError: If the applicant is not selected
        AlreadyConfirmedError: If the applicant already confirmed
    """
    now = now or datetime.now(UTC)

    if applicant.status != ApplicantStatus.SELECTED:
        raise ConfirmationUnavailableError()
    if applicant.confirmed_at is not None:
        raise AlreadyConfirmedError()

    applicant.status = ApplicantStatus.CONFIRMED
    applicant.confirmed_at = now
    await repository.add_progress(
        db,
        applicant_id=applicant.id,
        stage="confirmed",
        status=PROGRESS_COMPLETED,
        description="Participation confirmed by applicant",
        completed_at=now,
    )
    await db.commit()
    await db.refresh(applicant)

    if cache is not None:
        cache.invalidate_stats()

    logger.info(f"Participation confirmed: {applicant.registration_id}")

    try:
        await send_participation_confirmed(to_email=applicant.email, applicant_name=applicant.name)
    except Exception as e:
        logger.error(f"Failed to send confirmation email to {applicant.registration_id}: {e}")

    return applicant


async def confirm_by_registration_id(
    db: AsyncSession,
    registration_id: str,
    cache: StatsCache | None = None,
    now: datetime | None = None,
) -> Applicant:
    """
    Public confirmation using the code from the selection email.

    Unknown codes and applicants that are not awaiting confirmation get the
    same 404, so the endpoint does not reveal which codes exist.
    """
    applicant = await repository.get_by_registration_id(db, registration_id)
    if applicant is None or applicant.status != ApplicantStatus.SELECTED:
        raise UnknownApplicantError("Invalid registration ID or applicant not selected")
    return await confirm_participation(db, applicant, cache, now)


# ============================================
# Staff Management
# ============================================


async def list_applicants(
    db: AsyncSession,
    *,
    status: ApplicantStatus | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> ApplicantPage:
    items, total = await repository.list_applicants(
        db, status=status, search=search, page=page, page_size=page_size
    )
    return ApplicantPage(items=items, total=total, page=page, page_size=page_size)


async def get_applicant(db: AsyncSession, applicant_id: UUID) -> Applicant:
    applicant = await repository.get_by_id(db, applicant_id)
    if applicant is None:
        raise UnknownApplicantError()
    return applicant


async def create_applicant(
    db: AsyncSession,
    data: ApplicantCreate,
    cache: StatsCache,
    now: datetime | None = None,
) -> Applicant:
    """Create an applicant on someone's behalf. No email is sent."""
    now = now or datetime.now(UTC)

    if await repository.get_by_email(db, data.email):
        raise DuplicateApplicantError()

    registration_id = await allocate_registration_id(db, now)
    fields = data.model_dump(exclude={"status"})

    try:
        applicant = await repository.create(
            db, registration_id=registration_id, fields=fields, status=data.status
        )
        await repository.add_progress(
            db,
            applicant_id=applicant.id,
            stage="registered",
            status=PROGRESS_COMPLETED,
            description="Registered by staff",
            completed_at=now,
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateApplicantError() from None

    cache.invalidate_stats()
    logger.info(f"Applicant created by staff: {applicant.registration_id}")
    return applicant


async def update_applicant(
    db: AsyncSession,
    applicant_id: UUID,
    data: ApplicantUpdate,
    cache: StatsCache,
    staff: StaffUser | None = None,
    now: datetime | None = None,
) -> Applicant:
    """
    Apply a partial update.

    Raises:
        UnknownApplicantError: If the applicant does not exist
        DuplicateApplicantError: If the new email belongs to someone else
        StatusTransitionError: If the status change is not allowed
    """
    now = now or datetime.now(UTC)
    applicant = await get_applicant(db, applicant_id)
    updates = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    if updates.get("email"):
        updates["email"] = updates["email"].lower()

    new_status = updates.pop("status", None)
    if new_status is not None and new_status != applicant.status:
        _apply_status(applicant, new_status, now, staff)

    new_email = updates.get("email")
    if new_email and new_email.lower() != applicant.email.lower():
        existing = await repository.get_by_email(db, new_email)
        if existing is not None and existing.id != applicant.id:
            raise DuplicateApplicantError()

    repository.apply_updates(applicant, updates)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateApplicantError() from None
    await db.refresh(applicant)

    cache.invalidate_stats()
    logger.info(f"Applicant {applicant.registration_id} updated: {sorted(data.model_fields_set)}")
    return applicant


async def delete_applicant(db: AsyncSession, applicant_id: UUID, cache: StatsCache) -> None:
    """Delete an applicant together with sessions, submissions, progress and OTPs."""
    applicant = await get_applicant(db, applicant_id)
    registration_id = applicant.registration_id

    await repository.delete_applicant(db, applicant)
    await db.commit()

    cache.invalidate_stats()
    logger.info(f"Applicant deleted: {registration_id}")


async def select_applicant(
    db: AsyncSession,
    applicant_id: UUID,
    staff: StaffUser,
    cache: StatsCache,
    now: datetime | None = None,
) -> Applicant:
    """
    Select an applicant for the hackathon and notify them.

    Raises:
        UnknownApplicantError: If the applicant does not exist
        StatusTransitionError: If the applicant cannot be selected from
            their current status
    """
    now = now or datetime.now(UTC)
    applicant = await get_applicant(db, applicant_id)

    if applicant.status == ApplicantStatus.SELECTED:
        raise InvalidRequestError("Applicant is already selected", "ALREADY_SELECTED")

    _apply_status(applicant, ApplicantStatus.SELECTED, now, staff)
    await repository.add_progress(
        db,
        applicant_id=applicant.id,
        stage="selected",
        status=PROGRESS_COMPLETED,
        description="Selected for the hackathon",
        completed_at=now,
    )
    await db.commit()
    await db.refresh(applicant)

    cache.invalidate_stats()
    logger.info(f"Applicant {applicant.registration_id} selected by {staff.email}")

    try:
        email_sent = await send_selection_notification(
            to_email=applicant.email,
            applicant_name=applicant.name,
            registration_id=applicant.registration_id,
        )
        if not email_sent:
            logger.error(f"Failed to send selection email to {applicant.registration_id}")
    except Exception as e:
        logger.error(f"Exception sending selection email to {applicant.registration_id}: {e}")

    return applicant


async def bulk_update_status(
    db: AsyncSession,
    request: BulkStatusUpdateRequest,
    staff: StaffUser,
    cache: StatsCache,
    now: datetime | None = None,
) -> BulkStatusUpdateResponse:
    """
    Move many applicants to one status.

    Applicants whose transition is not allowed are skipped and reported;
    the rest are committed together.
    """
    now = now or datetime.now(UTC)

    requested = list(dict.fromkeys(rid.strip().upper() for rid in request.registration_ids))
    found = {
        a.registration_id: a
        for a in await repository.get_many_by_registration_ids(db, requested)
    }

    updated: list[str] = []
    not_found: list[str] = []
    invalid: list[str] = []

    for registration_id in requested:
        applicant = found.get(registration_id)
        if applicant is None:
            not_found.append(registration_id)
            continue
        if applicant.status == request.status:
            updated.append(registration_id)
            continue
        try:
            _apply_status(applicant, request.status, now, staff)
        except StatusTransitionError:
            invalid.append(registration_id)
            continue
        await repository.add_progress(
            db,
            applicant_id=applicant.id,
            stage=request.status.value,
            status=PROGRESS_COMPLETED,
            description=f"Status set to {request.status.value} by staff",
            completed_at=now,
        )
        updated.append(registration_id)

    await db.commit()
    cache.invalidate_stats()

    logger.info(
        f"Bulk status {request.status.value} by {staff.email}: "
        f"{len(updated)} updated, {len(not_found)} not found, {len(invalid)} rejected"
    )
    return BulkStatusUpdateResponse(
        updated=updated, not_found=not_found, invalid_transition=invalid
    )


async def send_notifications(
    db: AsyncSession,
    request: NotificationRequest,
) -> NotificationResponse:
    """Email the same message to each listed applicant, one result per recipient."""
    applicants = {a.id: a for a in await repository.get_many_by_ids(db, request.applicant_ids)}

    results: list[NotificationResult] = []
    for applicant_id in dict.fromkeys(request.applicant_ids):
        applicant = applicants.get(applicant_id)
        if applicant is None:
            results.append(
                NotificationResult(
                    applicant_id=applicant_id,
                    email=None,
                    success=False,
                    error="Applicant not found",
                )
            )
            continue

        try:
            sent = await send_notification(
                to_email=applicant.email,
                applicant_name=applicant.name,
                subject=request.subject,
                message=request.message,
            )
            error = None if sent else "Email delivery failed"
        except Exception as e:
            logger.error(f"Failed to notify applicant {applicant_id}: {e}")
            sent, error = False, str(e)

        results.append(
            NotificationResult(
                applicant_id=applicant_id, email=applicant.email, success=sent, error=error
            )
        )

    sent_count = sum(1 for r in results if r.success)
    failed_count = len(results) - sent_count
    logger.info(f"Notifications sent: {sent_count} successful, {failed_count} failed")

    return NotificationResponse(
        message=f"Notifications sent: {sent_count} successful, {failed_count} failed",
        results=results,
        summary=NotificationSummary(total=len(results), sent=sent_count, failed=failed_count),
    )
