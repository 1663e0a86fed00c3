"""
Applicant Auth Repository

Database operations for OTP records and applicant sessions.
Writes are flushed; the service commits.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.modules.applicant_auth.models import ApplicantSession, OneTimePassword, OtpPurpose

# ============================================
# OTP Records
# ============================================


async def create_otp(
    db: AsyncSession,
    *,
    identifier: str,
    code_hash: str,
    purpose: OtpPurpose,
    expires_at: datetime,
) -> OneTimePassword:
    otp = OneTimePassword(
        identifier=identifier,
        code_hash=code_hash,
        purpose=purpose,
        expires_at=expires_at,
        verified=False,
        attempts=0,
    )
    db.add(otp)
    await db.flush()
    return otp


async def get_latest_unverified_otp(
    db: AsyncSession,
    identifier: str,
    purpose: OtpPurpose,
) -> OneTimePassword | None:
    """
    Get the most recently issued unverified OTP for an identifier and purpose.

    Expired records are returned too; the caller decides what expiry means.
    """
    result = await db.execute(
        select(OneTimePassword)
        .where(
            OneTimePassword.identifier == identifier,
            OneTimePassword.purpose == purpose,
            OneTimePassword.verified.is_(False),
        )
        .order_by(OneTimePassword.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_unverified_otp_by_code(
    db: AsyncSession,
    identifier: str,
    purpose: OtpPurpose,
    code_hash: str,
) -> OneTimePassword | None:
    """Most recent unverified OTP for identifier + purpose whose digest matches."""
    result = await db.execute(
        select(OneTimePassword)
        .where(
            OneTimePassword.identifier == identifier,
            OneTimePassword.purpose == purpose,
            OneTimePassword.code_hash == code_hash,
            OneTimePassword.verified.is_(False),
        )
        .order_by(OneTimePassword.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def increment_otp_attempts(db: AsyncSession, otp_id: UUID) -> int:
    """
    Atomically add one failed attempt to an OTP record.

    Returns:
        The new attempt count
    """
    result = await db.execute(
        update(OneTimePassword)
        .where(OneTimePassword.id == otp_id)
        .values(attempts=OneTimePassword.attempts + 1)
        .returning(OneTimePassword.attempts)
    )
    return result.scalar_one()


async def mark_otp_verified(db: AsyncSession, otp_id: UUID) -> bool:
    """
    Mark an OTP as used.

    The update only matches a still-unverified record, so two concurrent
    verifications of the same code cannot both succeed.

    Returns:
        True if this call consumed the code
    """
    result = await db.execute(
        update(OneTimePassword)
        .where(OneTimePassword.id == otp_id, OneTimePassword.verified.is_(False))
        .values(verified=True)
        .returning(OneTimePassword.id)
    )
    return result.scalar_one_or_none() is not None


async def delete_expired_otps(db: AsyncSession, now: datetime) -> int:
    result = await db.execute(delete(OneTimePassword).where(OneTimePassword.expires_at <= now))
    return result.rowcount or 0


# ============================================
# Applicant Sessions
# ============================================


async def create_session(
    db: AsyncSession,
    *,
    applicant_id: UUID,
    token_hash: str,
    expires_at: datetime,
    now: datetime,
) -> ApplicantSession:
    session = ApplicantSession(
        applicant_id=applicant_id,
        token_hash=token_hash,
        expires_at=expires_at,
        last_activity=now,
    )
    db.add(session)
    await db.flush()
    return session


async def get_session_by_token_hash(db: AsyncSession, token_hash: str) -> ApplicantSession | None:
    result = await db.execute(
        select(ApplicantSession).where(ApplicantSession.token_hash == token_hash)
    )
    return result.scalar_one_or_none()


async def touch_session(db: AsyncSession, session_id: UUID, now: datetime) -> None:
    """Record activity on a session without changing its expiry."""
    await db.execute(
        update(ApplicantSession)
        .where(ApplicantSession.id == session_id)
        .values(last_activity=now)
    )


async def delete_session_by_token_hash(db: AsyncSession, token_hash: str) -> int:
    result = await db.execute(
        delete(ApplicantSession).where(ApplicantSession.token_hash == token_hash)
    )
    return result.rowcount or 0


async def delete_expired_sessions(db: AsyncSession, now: datetime) -> int:
    result = await db.execute(delete(ApplicantSession).where(ApplicantSession.expires_at <= now))
    return result.rowcount or 0
