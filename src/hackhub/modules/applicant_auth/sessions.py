"""
Applicant Session Manager

Issues, validates and destroys opaque bearer sessions for applicants.

- Tokens come from ``secrets.token_urlsafe`` (256 bits); only their SHA-256
  digest is stored.
- Expiry is absolute: a session is valid while ``now < expires_at``.
  Validation records ``last_activity`` but never extends the expiry.
- Validation fails closed and never tells the caller why a token was
  rejected (missing, unknown and expired all look the same).
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.config import settings
from hackhub.core.errors import UnauthenticatedError
from hackhub.core.security import generate_opaque_token, hash_token
from hackhub.modules.applicant_auth import repository
from hackhub.modules.applicant_auth.models import ApplicantSession
from hackhub.modules.applicants import repository as applicant_repository
from hackhub.modules.applicants.models import Applicant

logger = logging.getLogger(__name__)

SESSION_EXPIRY = timedelta(hours=settings.session_expiry_hours)


class InvalidSessionError(UnauthenticatedError):
    """Uniform rejection for any session that cannot be used."""

    def __init__(self):
        super().__init__(
            message="Invalid or expired session. Please log in again.",
            error_code="INVALID_SESSION",
        )


def session_expiry_for(created_at: datetime) -> datetime:
    return created_at + SESSION_EXPIRY


def is_session_active(session: ApplicantSession, now: datetime) -> bool:
    """A session is usable strictly before its expiry instant."""
    return now < session.expires_at


async def create_session(
    db: AsyncSession,
    applicant_id: UUID,
    now: datetime | None = None,
) -> str:
    """
    Mint a session for an applicant.

    The row is flushed but not committed, so it can share a transaction
    with the OTP that authorised it.

    Returns:
        The plain bearer token (never stored)
    """
    now = now or datetime.now(UTC)
    token = generate_opaque_token()

    await repository.create_session(
        db,
        applicant_id=applicant_id,
        token_hash=hash_token(token),
        expires_at=session_expiry_for(now),
        now=now,
    )
    logger.info(f"Created session for applicant {applicant_id}")
    return token


async def validate_session(
    db: AsyncSession,
    token: str | None,
    now: datetime | None = None,
) -> Applicant | None:
    """
    Resolve a bearer token to its applicant.

    Args:
        db: Database session
        token: Plain bearer token from the Authorization header
        now: Current time (injectable for tests)

    Returns:
        The applicant, or None if the token is missing, unknown, expired,
        or belongs to an applicant that no longer exists
    """
    if not token:
        return None

    now = now or datetime.now(UTC)
    session = await repository.get_session_by_token_hash(db, hash_token(token))

    if session is None or not is_session_active(session, now):
        return None

    applicant = await applicant_repository.get_by_id(db, session.applicant_id)
    if applicant is None:
        return None

    await repository.touch_session(db, session.id, now)
    await db.commit()
    return applicant


async def destroy_session(db: AsyncSession, token: str | None) -> None:
    """Delete a session. Succeeds whether or not the token still exists."""
    if not token:
        return

    removed = await repository.delete_session_by_token_hash(db, hash_token(token))
    await db.commit()
    if removed:
        logger.info("Applicant session destroyed")
