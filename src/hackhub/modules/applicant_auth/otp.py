"""
OTP Issuer

Passwordless applicant login with one-time numeric codes.

1. send_otp:
   - The identifier (email or mobile) must belong to a registered applicant
   - Expired OTP records are swept before a new one is stored
   - The 6-digit code is drawn digit by digit from ``secrets``
   - The code is emailed; mobile identifiers fall back to the applicant's
     registered email (there is no SMS channel)

2. verify_otp:
   - Earlier outstanding codes stay valid; the code is matched against
     every unverified record for identifier + purpose
   - Wrong codes count against the most recent record; once it has used 3
     attempts the identifier is locked until a new code is issued
   - Success consumes the code and mints a session in the same transaction

Security considerations:
- Codes are stored as SHA-256 digests and looked up by digest
- Codes are never logged outside development
- Attempt counting is a single UPDATE, so concurrent guesses are all counted
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.config import settings
from hackhub.core.email import send_otp_code
from hackhub.core.errors import InvalidRequestError, NotFoundError, UpstreamFailureError
from hackhub.core.security import generate_numeric_code, hash_token
from hackhub.modules.applicant_auth import repository, sessions
from hackhub.modules.applicant_auth.models import OneTimePassword, OtpPurpose
from hackhub.modules.applicants import repository as applicant_repository
from hackhub.modules.applicants.models import Applicant

logger = logging.getLogger(__name__)

OTP_EXPIRY = timedelta(minutes=settings.otp_expiry_minutes)


class ApplicantNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(
            message="No applicant found with this email or mobile number. Please register first.",
            error_code="APPLICANT_NOT_FOUND",
        )


class InvalidOrExpiredOtpError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Invalid or expired OTP. Please request a new one.",
            error_code="OTP_INVALID_OR_EXPIRED",
        )


class TooManyAttemptsError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="Too many attempts. Please request a new OTP.",
            error_code="OTP_TOO_MANY_ATTEMPTS",
        )


class OtpDeliveryError(UpstreamFailureError):
    def __init__(self):
        super().__init__(
            message="Failed to send OTP. Please try again.",
            error_code="OTP_DELIVERY_FAILED",
        )


@dataclass
class SendOtpResult:
    message: str
    masked_email: str
    expires_in_minutes: int


@dataclass
class VerifyOtpResult:
    applicant: Applicant
    session_token: str


def normalize_identifier(identifier: str) -> str:
    """Lower-case emails; strip whitespace from both emails and mobiles."""
    identifier = identifier.strip()
    return identifier.lower() if "@" in identifier else identifier


def mask_email(email: str) -> str:
    """
    Hide most of the local part of an email address.

    ``jane.doe@example.com`` becomes ``ja******@example.com``. Local parts of
    two characters or fewer are returned unchanged.
    """
    username, _, domain = email.partition("@")
    if len(username) <= 2:
        return email
    return f"{username[:2]}{'*' * (len(username) - 2)}@{domain}"


def is_otp_expired(otp: OneTimePassword, now: datetime) -> bool:
    return now >= otp.expires_at


def is_otp_exhausted(otp: OneTimePassword) -> bool:
    return otp.attempts >= settings.otp_max_attempts


async def send_otp(
    db: AsyncSession,
    identifier: str,
    purpose: OtpPurpose = OtpPurpose.LOGIN,
    now: datetime | None = None,
) -> SendOtpResult:
    """
    Issue a new one-time code and email it to the applicant.

    Earlier unexpired codes for the same identifier are left alone; only
    expired records are swept.

    Raises:
        ApplicantNotFoundError: If no applicant matches the identifier
        OtpDeliveryError: If the email could not be sent
    """
    now = now or datetime.now(UTC)
    identifier = normalize_identifier(identifier)

    applicant = await applicant_repository.get_by_identifier(db, identifier)
    if applicant is None:
        logger.info("OTP requested for unknown identifier")
        raise ApplicantNotFoundError()

    swept = await repository.delete_expired_otps(db, now)
    if swept:
        logger.debug(f"Swept {swept} expired OTP records")

    code = generate_numeric_code(settings.otp_length)
    await repository.create_otp(
        db,
        identifier=identifier,
        code_hash=hash_token(code),
        purpose=purpose,
        expires_at=now + OTP_EXPIRY,
    )
    await db.commit()

    if settings.is_development:
        logger.info(f"Development OTP for {identifier}: {code}")

    is_email = "@" in identifier
    destination = identifier if is_email else applicant.email

    sent = await send_otp_code(
        to_email=destination,
        applicant_name=applicant.name,
        code=code,
        expiry_minutes=settings.otp_expiry_minutes,
    )
    if not sent:
        raise OtpDeliveryError()

    masked = mask_email(destination)
    message = (
        f"OTP sent to your email: {masked}"
        if is_email
        else f"OTP sent to your registered email: {masked}"
    )
    logger.info(f"OTP issued for applicant {applicant.id} ({purpose.value})")

    return SendOtpResult(
        message=message,
        masked_email=masked,
        expires_in_minutes=settings.otp_expiry_minutes,
    )


async def verify_otp(
    db: AsyncSession,
    identifier: str,
    code: str,
    purpose: OtpPurpose = OtpPurpose.LOGIN,
    now: datetime | None = None,
) -> VerifyOtpResult:
    """
    Check a one-time code and open a session on success.

    Raises:
        InvalidOrExpiredOtpError: No outstanding code, code expired, or wrong code
        TooManyAttemptsError: The outstanding code has used up its attempts
        ApplicantNotFoundError: The applicant disappeared after the code was sent
    """
    now = now or datetime.now(UTC)
    identifier = normalize_identifier(identifier)

    latest = await repository.get_latest_unverified_otp(db, identifier, purpose)

    # All codes share one TTL, so an expired latest record means none are live
    if latest is None or is_otp_expired(latest, now):
        raise InvalidOrExpiredOtpError()

    if is_otp_exhausted(latest):
        raise TooManyAttemptsError()

    otp = await repository.get_unverified_otp_by_code(
        db, identifier, purpose, hash_token(code.strip())
    )

    if otp is None:
        attempts = await repository.increment_otp_attempts(db, latest.id)
        await db.commit()
        logger.warning(f"Wrong OTP for {latest.id} (attempt {attempts})")
        raise InvalidOrExpiredOtpError()

    if is_otp_expired(otp, now):
        raise InvalidOrExpiredOtpError()

    if is_otp_exhausted(otp):
        raise TooManyAttemptsError()

    if not await repository.mark_otp_verified(db, otp.id):
        # Consumed by a concurrent request
        await db.rollback()
        raise InvalidOrExpiredOtpError()

    applicant = await applicant_repository.get_by_identifier(db, identifier)
    if applicant is None:
        await db.commit()
        raise ApplicantNotFoundError()

    token = await sessions.create_session(db, applicant.id, now)
    await db.commit()

    logger.info(f"Applicant {applicant.id} logged in with OTP")
    return VerifyOtpResult(applicant=applicant, session_token=token)
