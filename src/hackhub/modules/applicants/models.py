"""
Applicant Models

Hackathon applicants and their append-only progress trail.

The applicant ``status`` column is the primary state variable of the
competition workflow:

    registered -> selected -> confirmed -> submitted -> won | not_selected

Older events also used per-round markers (round1, finalist, ...); those
values are kept so existing records still load.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hackhub.modules.shared import BaseModel

if TYPE_CHECKING:
    from hackhub.modules.applicant_auth.models import ApplicantSession
    from hackhub.modules.submissions.models import StageSubmission


class ApplicantStatus(str, enum.Enum):
    """Applicant workflow status."""

    REGISTERED = "registered"
    SELECTED = "selected"
    CONFIRMED = "confirmed"
    SUBMITTED = "submitted"
    WON = "won"
    NOT_SELECTED = "not_selected"

    # Legacy round markers
    ORIENTATION_SENT = "orientation_sent"
    SUBMISSION_ENABLED = "submission_enabled"
    UNDER_REVIEW = "under_review"
    EVENT_REGISTERED = "event_registered"
    ROUND1 = "round1"
    ROUND2 = "round2"
    ROUND3 = "round3"
    FINALIST = "finalist"
    REJECTED = "rejected"


class Applicant(BaseModel):
    """A person registered for the hackathon."""

    __tablename__ = "applicants"

    registration_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)

    # Identity
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    mobile: Mapped[str] = mapped_column(String(20), nullable=False)

    # Profile
    student_id: Mapped[str] = mapped_column(String(100), nullable=False)
    course: Mapped[str] = mapped_column(String(200), nullable=False)
    year_of_graduation: Mapped[str] = mapped_column(String(10), nullable=False)
    college_name: Mapped[str] = mapped_column(String(300), nullable=False)
    linkedin_profile: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Workflow
    status: Mapped[ApplicantStatus] = mapped_column(
        Enum(ApplicantStatus, name="applicant_status"),
        nullable=False,
        default=ApplicantStatus.REGISTERED,
    )
    selected_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    selected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Admin-only notes
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships (database-level cascade on delete)
    progress: Mapped[list["ApplicationProgress"]] = relationship(
        "ApplicationProgress",
        back_populates="applicant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ApplicationProgress.created_at",
    )
    sessions: Mapped[list["ApplicantSession"]] = relationship(
        "ApplicantSession",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    submissions: Mapped[list["StageSubmission"]] = relationship(
        "StageSubmission",
        back_populates="applicant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_applicants_status", "status"),
        Index("ix_applicants_mobile", "mobile"),
    )

    def __repr__(self) -> str:
        return f"<Applicant(id={self.id}, registration_id={self.registration_id})>"


class ApplicationProgress(BaseModel):
    """
    Append-only audit entry for an applicant's journey.

    Rows are only ever inserted; nothing updates or deletes them except the
    cascade when the applicant itself is removed.
    """

    __tablename__ = "application_progress"

    applicant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applicants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stage: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    applicant: Mapped["Applicant"] = relationship("Applicant", back_populates="progress")
