"""
Applicant Authentication Models

One-time passwords and opaque bearer sessions for applicant login.
Only SHA-256 digests of codes and tokens are stored.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hackhub.modules.shared import BaseModel


class OtpPurpose(str, enum.Enum):
    """What a one-time password was issued for."""

    LOGIN = "login"
    REGISTRATION = "registration"


class OneTimePassword(BaseModel):
    """
    A short-lived numeric code bound to an identifier and a purpose.

    Lifecycle: issued -> verified (single use), or issued -> expired, or
    issued -> attempts exhausted. None of the terminal states can be left.
    """

    __tablename__ = "otp_verifications"

    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    code_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    purpose: Mapped[OtpPurpose] = mapped_column(
        Enum(OtpPurpose, name="otp_purpose"),
        nullable=False,
        default=OtpPurpose.LOGIN,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_otp_verifications_lookup", "identifier", "purpose", "verified"),
        Index("ix_otp_verifications_expires_at", "expires_at"),
    )


class ApplicantSession(BaseModel):
    """Opaque bearer session issued after a successful OTP verification."""

    __tablename__ = "applicant_sessions"

    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    applicant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applicants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_activity: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_applicant_sessions_expires_at", "expires_at"),)
