"""
Stage Submission Models

At most one submission per (applicant, stage) pair, enforced by a unique
constraint. Resubmitting overwrites the existing row.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hackhub.modules.shared import BaseModel

if TYPE_CHECKING:
    from hackhub.modules.applicants.models import Applicant
    from hackhub.modules.competitions.models import CompetitionRound


class SubmissionStatus(str, enum.Enum):
    """Lifecycle of a stage submission."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    SELECTED = "selected"
    REJECTED = "rejected"


class StageSubmission(BaseModel):
    """An applicant's deliverables for one competition round."""

    __tablename__ = "stage_submissions"

    applicant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applicants.id", ondelete="CASCADE"),
        nullable=False,
    )
    stage_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("competition_rounds.id", ondelete="CASCADE"),
        nullable=False,
    )

    github_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # [{"name": str, "url": str}, ...]
    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(SubmissionStatus, name="submission_status"),
        nullable=False,
        default=SubmissionStatus.DRAFT,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Jury review
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    applicant: Mapped["Applicant"] = relationship("Applicant", back_populates="submissions")
    stage: Mapped["CompetitionRound"] = relationship("CompetitionRound", lazy="joined")

    __table_args__ = (
        UniqueConstraint("applicant_id", "stage_id", name="uq_stage_submissions_applicant_stage"),
        Index("ix_stage_submissions_stage_status", "stage_id", "status"),
    )
